from unittest import mock

import pytest

from backend.auth import password
from backend.auth.errors import CredentialDerivationError
from backend.auth.password import derive_credential, verify_credential


def test_derived_credential_verifies_same_password() -> None:
    credential = derive_credential('s3cret-pass')

    assert verify_credential('s3cret-pass', credential.hash, credential.salt) is True


def test_derived_credential_rejects_other_password() -> None:
    credential = derive_credential('s3cret-pass')

    assert verify_credential('s3cret-pass!', credential.hash, credential.salt) is False


def test_derive_generates_fresh_salt_each_call() -> None:
    first = derive_credential('same-password')
    second = derive_credential('same-password')

    assert first.salt != second.salt
    assert first.hash != second.hash


def test_derive_produces_hex_salt_and_fixed_length_hash() -> None:
    credential = derive_credential('abcdef')

    assert len(credential.salt) == 32
    int(credential.salt, 16)
    assert len(credential.hash) == 128
    int(credential.hash, 16)


def test_derive_with_explicit_salt_is_deterministic() -> None:
    first = derive_credential('abcdef', salt='00ff00ff00ff00ff00ff00ff00ff00ff')
    second = derive_credential('abcdef', salt='00ff00ff00ff00ff00ff00ff00ff00ff')

    assert first == second


def test_verify_returns_false_for_hash_of_wrong_length() -> None:
    credential = derive_credential('abcdef')

    assert verify_credential('abcdef', credential.hash[:64], credential.salt) is False


@pytest.mark.parametrize('stored_hash', ['', 'not-hex-at-all', 'abc'])
def test_verify_returns_false_for_unparseable_hash(stored_hash: str) -> None:
    assert verify_credential('abcdef', stored_hash, '00' * 16) is False


def test_verify_uses_constant_time_comparison() -> None:
    credential = derive_credential('abcdef')

    with mock.patch.object(password.hmac, 'compare_digest', return_value=True) as compare:
        assert verify_credential('abcdef', credential.hash, credential.salt) is True

    compare.assert_called_once()


def test_salt_generation_failure_is_reported_as_derivation_error(monkeypatch: pytest.MonkeyPatch) -> None:
    def broken_entropy(_nbytes: int) -> str:
        raise OSError('no entropy')

    monkeypatch.setattr(password.secrets, 'token_hex', broken_entropy)

    with pytest.raises(CredentialDerivationError):
        derive_credential('abcdef')


def test_verify_returns_false_for_password_with_lone_surrogate() -> None:
    credential = derive_credential('abcdef')

    assert verify_credential('abc\ud800def', credential.hash, credential.salt) is False


def test_kdf_failure_is_reported_as_derivation_error(monkeypatch: pytest.MonkeyPatch) -> None:
    def broken_scrypt(*_args, **_kwargs) -> bytes:
        raise ValueError('invalid scrypt parameters')

    monkeypatch.setattr(password.hashlib, 'scrypt', broken_scrypt)

    with pytest.raises(CredentialDerivationError):
        derive_credential('abcdef', salt='00' * 16)
