import logging

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field, field_validator
from sqlalchemy.orm import Session

from backend.auth import jwt_handler
from backend.auth.dependencies import get_current_user, unauthorized
from backend.auth.errors import CredentialDerivationError, InvalidCredentials
from backend.auth.password import KEY_LENGTH, SALT_BYTES, Credential, verify_credential
from backend.auth.users import UserStore
from backend.database import get_db
from backend.models.user import User

router = APIRouter(tags=['auth'])

logger = logging.getLogger(__name__)

# Checked against when the email is unknown so both login failures cost one derivation.
DUMMY_CREDENTIAL = Credential(hash='0' * KEY_LENGTH * 2, salt='0' * SALT_BYTES * 2)


class LoginRequest(BaseModel):
    email: str
    password: str = Field(min_length=6)

    @field_validator('email')
    @classmethod
    def validate_email(cls, value: str) -> str:
        local, _, domain = value.partition('@')
        if not local or '.' not in domain or ' ' in value:
            raise ValueError('Invalid email address.')
        return value


class UserResponse(BaseModel):
    id: str
    email: str
    name: str
    role: str

    class Config:
        from_attributes = True


class LoginResponse(BaseModel):
    token: str
    user: UserResponse


class ProfileResponse(BaseModel):
    user: UserResponse


def check_credentials(email: str, password: str, users: UserStore) -> User:
    user = users.find_by_email(email)
    if user is None:
        verify_credential(password, DUMMY_CREDENTIAL.hash, DUMMY_CREDENTIAL.salt)
        raise InvalidCredentials('unknown email')
    if not verify_credential(password, user.password_hash, user.salt):
        raise InvalidCredentials('wrong password')
    return user


@router.post('/auth/login', response_model=LoginResponse)
def login(data: LoginRequest, db: Session = Depends(get_db)):
    try:
        user = check_credentials(data.email, data.password, UserStore(db))
    except InvalidCredentials as exc:
        logger.info('Login rejected: %s', exc)
        raise unauthorized(exc) from exc
    except CredentialDerivationError as exc:
        logger.exception('Credential derivation failed during login')
        raise HTTPException(status_code=500, detail='Unable to verify credentials') from exc

    token = jwt_handler.issue_token(user.id, user.role)
    logger.info('User %s logged in', user.id)
    return {'token': token, 'user': user}


@router.post('/auth/logout')
def logout(current_user: User = Depends(get_current_user)):
    # Tokens are stateless; the client discards its copy.
    return {'message': 'Logged out'}


@router.get('/auth/profile', response_model=ProfileResponse)
def profile(current_user: User = Depends(get_current_user)):
    return {'user': current_user}
