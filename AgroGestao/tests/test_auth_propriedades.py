from conftest import bearer
from utils.security import criar_token_acesso, decodificar_token


def _login(client, username, password):
    return client.post("/auth/token", data={"username": username, "password": password})


def test_login_returns_token_with_property_claim(client, operador, propriedade):
    r = _login(client, "operador", "senha123")

    assert r.status_code == 200, r.text
    body = r.json()
    assert body["token_type"] == "bearer"
    claims = decodificar_token(body["access_token"])
    assert claims["sub"] == str(operador.usuario_id)
    assert claims["prop"] == propriedade.propriedade_id


def test_login_with_wrong_password_is_unauthorized(client, operador):
    r = _login(client, "operador", "errada")
    assert r.status_code == 401
    assert r.headers["www-authenticate"] == "Bearer"


def test_inactive_user_cannot_log_in(client, db, operador):
    operador.status = "i"
    db.commit()
    assert _login(client, "operador", "senha123").status_code == 401


def test_me_requires_valid_token(client, admin):
    assert client.get("/auth/me").status_code == 401
    assert client.get("/auth/me", headers={"Authorization": "Bearer lixo"}).status_code == 401

    expirado = criar_token_acesso(admin.usuario_id, expires_minutes=-1)
    assert client.get("/auth/me", headers={"Authorization": f"Bearer {expirado}"}).status_code == 401

    r = client.get("/auth/me", headers=bearer(admin))
    assert r.status_code == 200
    assert r.json()["username"] == "admin"


def test_only_admin_creates_users(client, admin_headers, operador, propriedade):
    novo = {
        "username": "colhedor",
        "nome": "Colhedor",
        "email": "colhedor@agro.local",
        "password": "segredo1",
        "propriedade_id": propriedade.propriedade_id,
    }

    assert client.post("/auth/usuarios", json=novo, headers=bearer(operador)).status_code == 403

    r = client.post("/auth/usuarios", json=novo, headers=admin_headers)
    assert r.status_code == 201
    assert r.json()["propriedade_id"] == propriedade.propriedade_id

    assert client.post("/auth/usuarios", json=novo, headers=admin_headers).status_code == 409
    assert _login(client, "colhedor", "segredo1").status_code == 200


def test_regular_user_needs_property(client, admin_headers):
    r = client.post(
        "/auth/usuarios",
        json={"username": "solto", "nome": "Solto", "email": "solto@agro.local", "password": "segredo1"},
        headers=admin_headers,
    )
    assert r.status_code == 422


# ============================================================================
# Propriedades e áreas
# ============================================================================

def test_property_listing_is_scoped_to_user(client, admin_headers, operador, propriedade, outra_propriedade):
    todas = client.get("/propriedades", headers=admin_headers).json()
    assert {p["propriedade_id"] for p in todas} == {propriedade.propriedade_id, outra_propriedade.propriedade_id}

    minhas = client.get("/propriedades", headers=bearer(operador)).json()
    assert [p["propriedade_id"] for p in minhas] == [propriedade.propriedade_id]


def test_operator_cannot_create_property(client, operador):
    r = client.post(
        "/propriedades",
        json={"nome": "Nova", "localizacao": "Rio Verde - GO", "tamanho_ha": 50},
        headers=bearer(operador),
    )
    assert r.status_code == 403


def test_area_hierarchy(client, admin_headers, propriedade, outra_propriedade):
    base = f"/propriedades/{propriedade.propriedade_id}"

    setor = client.post(f"{base}/setores", json={"nome": "Setor A", "area_ha": 30}, headers=admin_headers)
    assert setor.status_code == 201
    setor_id = setor.json()["setor_id"]

    lote = client.post(f"{base}/lotes", json={"nome": "Lote A1", "setor_id": setor_id}, headers=admin_headers)
    assert lote.status_code == 201
    lote_id = lote.json()["lote_id"]

    canteiro = client.post(f"{base}/canteiros", json={"nome": "C-01", "lote_id": lote_id}, headers=admin_headers)
    assert canteiro.status_code == 201

    # Setor de uma propriedade não serve de pai em outra
    r = client.post(
        f"/propriedades/{outra_propriedade.propriedade_id}/lotes",
        json={"nome": "Lote X", "setor_id": setor_id},
        headers=admin_headers,
    )
    assert r.status_code == 404

    lotes = client.get(f"{base}/lotes", params={"setor_id": setor_id}, headers=admin_headers).json()
    assert [lt["nome"] for lt in lotes] == ["Lote A1"]


def test_cultures_are_per_property(client, admin_headers, operador, propriedade, outra_propriedade):
    r = client.post(
        f"/propriedades/{propriedade.propriedade_id}/culturas",
        json={"nome": "Soja", "variedade": "BRS 1010", "ciclo_estimado_dias": 110},
        headers=bearer(operador),
    )
    assert r.status_code == 201

    r = client.get(f"/propriedades/{outra_propriedade.propriedade_id}/culturas", headers=bearer(operador))
    assert r.status_code == 403
