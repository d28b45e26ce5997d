"""
CLI command tests.
"""

from datetime import timedelta

from erp_web.extensions import db
from erp_web.models import ClientStorageEntry
from erp_web.time_utils import utcnow


class TestStorageCommands:

    def test_init(self, runner):
        result = runner.invoke(args=["storage", "init"])
        assert result.exit_code == 0
        assert "Client storage table ready" in result.output

    def test_purge_removes_only_stale_rows(self, app, runner):
        with app.app_context():
            db.session.add(ClientStorageEntry(
                context_id="a" * 32, key="token", value="old", updated_at=utcnow() - timedelta(days=45)
            ))
            db.session.add(ClientStorageEntry(context_id="b" * 32, key="token", value="new"))
            db.session.commit()

        result = runner.invoke(args=["storage", "purge", "--days", "30"])
        assert result.exit_code == 0
        assert "Deleted 1 client storage entries" in result.output

        with app.app_context():
            remaining = db.session.query(ClientStorageEntry).all()
            assert [entry.value for entry in remaining] == ["new"]

    def test_show_masks_token(self, app, runner):
        with app.app_context():
            db.session.add(ClientStorageEntry(context_id="c" * 32, key="token", value="secret-token"))
            db.session.add(ClientStorageEntry(context_id="c" * 32, key="userType", value="company"))
            db.session.commit()

        result = runner.invoke(args=["storage", "show", "c" * 32])
        assert result.exit_code == 0
        assert "secret-token" not in result.output
        assert "****" in result.output
        assert "company" in result.output

    def test_show_unknown_context(self, runner):
        result = runner.invoke(args=["storage", "show", "d" * 32])
        assert "No entries" in result.output

    def test_purge_rejects_zero_days(self, runner):
        result = runner.invoke(args=["storage", "purge", "--days", "0"])
        assert result.exit_code != 0


class TestAccessCommands:

    def test_list(self, runner):
        result = runner.invoke(args=["access", "list"])
        assert result.exit_code == 0
        assert "/dashboard/admin" in result.output
        assert "Store" in result.output

    def test_check_denied(self, runner):
        result = runner.invoke(args=["access", "check", "--user-type", "user", "--department", "HR", "/dashboard/store"])
        assert result.exit_code == 0
        assert "DENY" in result.output
        assert "redirect_home -> /dashboard" in result.output

    def test_check_no_session(self, runner):
        result = runner.invoke(args=["access", "check", "/dashboard"])
        assert result.exit_code == 0
        assert "redirect_login -> /login" in result.output

    def test_check_company(self, runner):
        result = runner.invoke(args=["access", "check", "--user-type", "company", "/dashboard/hr"])
        assert "ALLOW" in result.output
        assert "Landing:    /dashboard" in result.output


class TestNavCommands:

    def test_show_store_module(self, runner):
        result = runner.invoke(args=["nav", "show", "--user-type", "company", "--path", "/dashboard/store"])
        assert result.exit_code == 0
        assert "More: Masters" in result.output
        assert "7 top-level item(s)" in result.output

    def test_show_unknown_department_rejected(self, runner):
        result = runner.invoke(args=["nav", "show", "--user-type", "user", "--department", "Finance"])
        assert result.exit_code != 0
