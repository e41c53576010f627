import hashlib

def hash_password(password: str) -> str:
    """비밀번호를 SHA-256 해시(hex 문자열)로 변환합니다."""
    return hashlib.sha256(password.encode('utf-8')).hexdigest()
