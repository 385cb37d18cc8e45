from datetime import timedelta

from perfdesk.services import auth as auth_service

def test_password_hashing():
    """Test that password hashing and verification works correctly."""
    password = "MySecurePassword123!"
    hashed = auth_service.get_password_hash(password)
    assert hashed != password
    assert auth_service.verify_password(password, hashed)
    assert not auth_service.verify_password("WrongPassword", hashed)

def test_access_token_round_trip():
    token = auth_service.create_access_token({"sub": "a@b.io", "role": "admin"})
    payload = auth_service.decode_access_token(token)
    assert payload["sub"] == "a@b.io"
    assert payload["type"] == "access"

def test_expired_token_is_flagged():
    token = auth_service.create_access_token({"sub": "a@b.io"}, expires_delta=timedelta(seconds=-5))
    assert auth_service.decode_access_token(token) == {"error": "TOKEN_EXPIRED"}

def test_tampered_token_is_rejected():
    token = auth_service.create_access_token({"sub": "a@b.io"})
    assert auth_service.decode_access_token(token.rsplit(".", 1)[0] + ".invalid-signature") is None
