# utils/locks.py
"""
Locks em processo por chave (ex.: planejamento_id).

Serializa a conciliação de um mesmo planejamento entre requisições
atendidas por threads do mesmo processo. Entre processos, o serviço
complementa com SELECT ... FOR UPDATE na linha do planejamento.
"""
import threading
from contextlib import contextmanager
from typing import Hashable, Iterator


class LockTimeoutError(Exception):
    """Não foi possível obter o lock dentro do tempo limite."""

    def __init__(self, chave: Hashable, timeout: float):
        super().__init__(f"Lock de {chave!r} não obtido em {timeout}s")
        self.chave = chave
        self.timeout = timeout


class KeyedLockRegistry:
    def __init__(self):
        self._guard = threading.Lock()
        self._locks: dict[Hashable, threading.Lock] = {}
        self._users: dict[Hashable, int] = {}

    def _acquire_entry(self, chave: Hashable) -> threading.Lock:
        with self._guard:
            lock = self._locks.get(chave)
            if lock is None:
                lock = threading.Lock()
                self._locks[chave] = lock
                self._users[chave] = 0
            self._users[chave] += 1
            return lock

    def _release_entry(self, chave: Hashable) -> None:
        with self._guard:
            self._users[chave] -= 1
            if self._users[chave] == 0:
                # Ninguém mais aguarda: descarta para não crescer indefinidamente
                del self._users[chave]
                del self._locks[chave]

    @contextmanager
    def hold(self, chave: Hashable, timeout: float | None = None) -> Iterator[None]:
        lock = self._acquire_entry(chave)
        try:
            acquired = lock.acquire(timeout=-1 if timeout is None else timeout)
            if not acquired:
                raise LockTimeoutError(chave, timeout)
            try:
                yield
            finally:
                lock.release()
        finally:
            self._release_entry(chave)

    def __len__(self) -> int:
        with self._guard:
            return len(self._locks)


plan_locks = KeyedLockRegistry()
