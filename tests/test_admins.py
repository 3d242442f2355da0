import yaml

from gigauth.auth.admins import load_admin_seed, seed_admins
from gigauth.core.principals import Role


def _write(path, admins):
    path.write_text(yaml.safe_dump({"version": 1, "admins": admins}), encoding="utf-8")


def test_missing_file_means_no_admins(tmp_path, store):
    assert load_admin_seed(tmp_path / "nope.yml") == {}
    assert seed_admins(store, tmp_path / "nope.yml") == 0


def test_seed_inserts_active_admins_once(tmp_path, store, hasher):
    path = tmp_path / "admins.yml"
    _write(
        path,
        {
            "Root@X.com": {"password_hash": hasher.hash("rootpw")},
            "old@x.com": {"password_hash": hasher.hash("oldpw"), "active": False},
            "broken@x.com": "not a mapping",
            "nohash@x.com": {"active": True},
        },
    )
    assert set(load_admin_seed(path)) == {"root@x.com", "old@x.com"}
    assert seed_admins(store, path) == 1
    assert seed_admins(store, path) == 0

    admin = store.find_by_email(Role.ADMIN, "root@x.com")
    assert hasher.verify("rootpw", admin.password_hash)
    assert store.find_by_email(Role.ADMIN, "old@x.com") is None
