import pytest

from gigauth.core.kinds import KINDS, PLATFORMS, role_for_platform, sanitize
from gigauth.core.principals import Principal, Role
from gigauth.errors import InvalidPlatform


def test_every_role_has_a_kind():
    assert set(KINDS) == set(Role)
    assert set(PLATFORMS.values()) == set(Role)


@pytest.mark.parametrize("platform,role", [("mobile", Role.WORKER), ("web-employer", Role.EMPLOYER), ("Web-Admin", Role.ADMIN)])
def test_platform_mapping(platform, role):
    assert role_for_platform(platform) is role


@pytest.mark.parametrize("platform", [None, "", "web", "ios"])
def test_unknown_platform(platform):
    with pytest.raises(InvalidPlatform):
        role_for_platform(platform)


@pytest.mark.parametrize("role", list(Role))
def test_sanitize_never_exposes_password(role):
    p = Principal(role=role, id="id-1", email="e@x.com", password_hash="$argon2id$secret", attributes={"createdAt": None})
    out = sanitize(p)
    assert out[KINDS[role].id_key] == "id-1"
    assert "password" not in out
    assert "$argon2id$secret" not in out.values()
