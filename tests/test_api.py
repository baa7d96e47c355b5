from datetime import datetime

from xpense.auth.token import create_access_token
from xpense.core.errors import LedgerErrorCode


def test_create_profile_sets_up_wallet(client, ledger):
    resp = client.post("/api/create-profile", json={"name": "Ada", "email": "Ada@Example.com"})

    assert resp.status_code == 201
    body = resp.json()
    assert body["access_token"]
    assert body["user"]["email"] == "ada@example.com"
    assert "wallet_secret_key" not in body["user"]
    assert body["wallet"]["wallet_state"] == "trustline_ready"
    assert body["wallet"]["warnings"] == []

    me = client.get("/api/me", headers={"Authorization": f"Bearer {body['access_token']}"})
    assert me.status_code == 200
    assert me.json()["wallet_has_trustline"] is True


def test_signup_succeeds_when_faucet_is_down(client, ledger):
    ledger.fund_error = "Failed to fund wallet: 503"

    resp = client.post("/api/create-profile", json={"name": "Ada", "email": "ada@example.com"})

    assert resp.status_code == 201
    wallet = resp.json()["wallet"]
    assert wallet["wallet_state"] == "keys_generated"
    assert wallet["warnings"] == ["Failed to fund wallet: 503"]


def test_duplicate_email_is_rejected(client):
    client.post("/api/create-profile", json={"name": "Ada", "email": "ada@example.com"})

    resp = client.post("/api/create-profile", json={"name": "Other", "email": "ada@example.com"})

    assert resp.status_code == 400
    assert resp.json() == {"detail": "User already exists", "error": "invalid_request", "code": None}


def test_session_generates_missing_wallet(client, make_user, auth):
    user = make_user(ready=False)

    resp = client.post("/api/session", headers=auth(user.id))

    assert resp.status_code == 200
    assert resp.json()["wallet"]["wallet_state"] == "trustline_ready"
    assert resp.json()["user"]["wallet_public_key"].startswith("G")


def test_auth_errors(client):
    assert client.get("/api/me").status_code == 401
    assert client.get("/api/me", headers={"Authorization": "Bearer not-a-jwt"}).status_code == 403
    ghost = create_access_token({"sub": "9999"})
    assert client.get("/api/me", headers={"Authorization": f"Bearer {ghost}"}).status_code == 404


def test_reward_and_history(client, make_user, auth):
    user = make_user()

    resp = client.post("/api/tokens/reward", json={"amount": "7", "challenge_id": 2}, headers=auth(user.id))

    assert resp.status_code == 200
    assert resp.json()["amount"] == 7

    history = client.get("/api/tokens/transactions", headers=auth(user.id)).json()
    assert len(history) == 1
    assert history[0]["type"] == "Reward"
    assert history[0]["activity"] == {"kind": "challenge", "challenge_id": 2}


def test_reward_with_bad_amount(client, make_user, auth):
    resp = client.post("/api/tokens/reward", json={"amount": "lots"}, headers=auth(make_user().id))

    assert resp.status_code == 400
    assert resp.json()["error"] == "invalid_reward_request"


def test_reward_ledger_rejection_is_502(client, ledger, make_user, auth):
    user = make_user()
    ledger.payment_error = LedgerErrorCode.underfunded

    resp = client.post("/api/tokens/reward", json={"amount": 5}, headers=auth(user.id))

    assert resp.status_code == 502
    assert resp.json()["code"] == "underfunded"
    assert client.get("/api/tokens/transactions", headers=auth(user.id)).json() == []


def test_wallet_and_balance(client, make_user, auth):
    user = make_user(balance="40")

    wallet = client.get("/api/tokens/wallet", headers=auth(user.id)).json()
    balance = client.get("/api/tokens/balance", headers=auth(user.id)).json()

    assert wallet["wallet_public_key"] == user.wallet_public_key
    assert balance["ledger_balance"] == "40"
    assert balance["asset_code"] == "EDU"


def test_challenge_flow(client, make_user, auth):
    headers = auth(make_user().id)
    created = client.post(
        "/api/challenges/",
        json={
            "title": "Cook at home",
            "start_date": datetime(2024, 4, 1).isoformat(),
            "end_date": datetime(2024, 4, 30).isoformat(),
            "target_amount": 100,
            "reward": 20,
        },
        headers=headers,
    ).json()

    first = client.post(f"/api/challenges/{created['id']}/complete", headers=headers)
    second = client.post(f"/api/challenges/{created['id']}/complete", headers=headers)

    assert first.status_code == 200
    assert first.json()["tokens_rewarded"] == 20
    assert second.status_code == 400
    assert second.json()["error"] == "already_processed"


def test_daily_saving_flow(client, make_user, auth):
    headers = auth(make_user().id)

    toggled = client.post("/api/daily-saving/toggle", json={"did_save_today": True}, headers=headers).json()
    today = client.get("/api/daily-saving/today", headers=headers).json()
    history = client.get("/api/daily-saving/history", headers=headers).json()

    assert toggled["daily_saving"]["is_rewarded"] is True
    assert toggled["daily_saving"]["tokens_rewarded"] == 10
    assert toggled["quote"]["text"]
    assert today["streak"] == 1
    assert len(history["entries"]) == 1
    assert len(client.get("/api/daily-saving/quotes").json()) == 10


def test_quiz_flow(client, make_user, auth):
    headers = auth(make_user().id)
    assert client.post("/api/quiz/seed", headers=headers).status_code == 201
    assert client.post("/api/quiz/seed", headers=headers).status_code == 400

    questions = client.get("/api/quiz/random", params={"count": 3}, headers=headers).json()
    assert len(questions) == 3
    assert all("correct_answer" not in q for q in questions)

    result = client.post(
        "/api/quiz/submit", json={"quiz_id": questions[0]["id"], "answer": "definitely wrong"}, headers=headers
    ).json()
    assert result["is_correct"] is False
    assert result["points_earned"] == 0

    stats = client.get("/api/quiz/stats", headers=headers).json()
    assert stats["total_attempts"] == 1


def test_quiz_correct_answer_without_wallet_fails(client, make_user, auth):
    headers = auth(make_user(ready=False).id)
    client.post("/api/quiz/seed", headers=headers)
    question = client.get("/api/quiz/random", params={"category": "Economics", "count": 1}, headers=headers).json()[0]
    correct = next(option for option in question["options"] if option in {"GDP", "Inflation"})

    resp = client.post("/api/quiz/submit", json={"quiz_id": question["id"], "answer": correct}, headers=headers)

    assert resp.status_code == 400
    assert resp.json()["code"] == "no_wallet"


def test_community_flow(client, make_user, auth):
    headers = auth(make_user().id)

    created = client.post("/api/community/posts", json={"content": "Packed lunch all week"}, headers=headers)
    post_id = created.json()["post"]["id"]
    client.post(f"/api/community/posts/{post_id}/like", headers=headers)
    commented = client.post(f"/api/community/posts/{post_id}/comments", json={"content": "nice"}, headers=headers)

    assert created.status_code == 201
    assert created.json()["token_reward"] == 5
    assert commented.json()["likes"] == 1
    assert commented.json()["comments"][0]["content"] == "nice"
    assert len(client.get("/api/community/posts", headers=headers).json()) == 1


def test_book_purchase_flow(client, make_user, auth):
    headers = auth(make_user(balance="100").id)
    client.post("/api/books/seed", headers=headers)
    books = client.get("/api/books/").json()
    cheapest = min(books, key=lambda b: b["price"])

    bought = client.post(f"/api/books/{cheapest['id']}/purchase", headers=headers)
    again = client.post(f"/api/books/{cheapest['id']}/purchase", headers=headers)
    mine = client.get("/api/books/mine", headers=headers).json()

    assert bought.status_code == 201
    assert bought.json()["book"]["tokens_paid"] == cheapest["price"]
    assert again.status_code == 400
    assert [b["book_id"] for b in mine] == [cheapest["id"]]

    history = client.get("/api/tokens/transactions", headers=headers).json()
    assert history[0]["type"] == "Purchase"
    assert history[0]["amount"] == -cheapest["price"]


def test_seeding_requires_login(client, make_user, auth):
    assert client.post("/api/quiz/seed").status_code == 401
    assert client.post("/api/books/seed").status_code == 401

    headers = auth(make_user().id)
    assert client.post("/api/books/seed", headers=headers).status_code == 201
