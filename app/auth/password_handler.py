from typing import Optional

from passlib.context import CryptContext

DEFAULT_BCRYPT_ROUNDS = 12


def build_password_context(rounds: int = DEFAULT_BCRYPT_ROUNDS) -> CryptContext:
    """
    Contexto de hashing bcrypt com o custo informado (BCRYPT_ROUNDS da aplicação)
    """
    return CryptContext(
        schemes=["bcrypt"],
        default="bcrypt",
        bcrypt__rounds=rounds,
        deprecated="auto",
    )


# Usado quando nenhum contexto é informado
pwd_context = build_password_context()


def verify_password(plain_password: str, hashed_password: str, context: Optional[CryptContext] = None) -> bool:
    """
    Verifica se a senha fornecida corresponde ao hash armazenado.
    A comparação em tempo constante é feita pelo próprio passlib.
    """
    if not plain_password or not hashed_password:
        return False
    try:
        return (context or pwd_context).verify(plain_password, hashed_password)
    except (ValueError, TypeError):
        # Hash malformado ou de esquema desconhecido
        return False


def get_password_hash(password: str, context: Optional[CryptContext] = None) -> str:
    """
    Gera um hash seguro (com salt novo) para a senha fornecida
    """
    return (context or pwd_context).hash(password)
