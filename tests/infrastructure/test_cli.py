"""End-to-end tests of the command line, against a temporary data directory."""

from datetime import date, timedelta

import pytest
from click.testing import CliRunner

from marketorders.config import get_settings
from marketorders.domain.model.calendar import WEEKDAYS
from marketorders.infrastructure.cli.main import cli

# Far enough ahead to stay in the future whatever the marketplace time zone.
DELIVERY_DAY = (date.today() + timedelta(days=3)).isoformat()


@pytest.fixture
def run(tmp_path, monkeypatch):
    monkeypatch.setenv("MARKETORDERS_DATA_DIR", str(tmp_path))
    get_settings.cache_clear()
    runner = CliRunner()

    def invoke(*args: str, expect_ok: bool = True):
        result = runner.invoke(cli, list(args))
        if expect_ok:
            assert result.exit_code == 0, result.output
        return result

    yield invoke
    get_settings.cache_clear()


@pytest.fixture
def stocked(run):
    """One active boutique open every day, one product, a cart for c1."""
    days = [arg for day in WEEKDAYS for arg in ("--day", day)]
    run("boutique", "register", "--name", "Chez Rado", "--id", "b1",
        "--delivery", "--collect", *days)
    run("boutique", "approve", "--id", "b1")
    run("product", "add", "--name", "Rice 5kg", "--boutique", "b1", "--price", "12000")
    run("cart", "add", "--client", "c1", "--product", "1", "--quantity", "2")
    return run


class TestCatalogCommands:

    def test_product_list(self, stocked):
        result = stocked("product", "list")
        assert "Rice 5kg" in result.output
        assert "12000.00 MGA" in result.output

    def test_cart_show(self, stocked):
        result = stocked("cart", "show", "--client", "c1")
        assert "24000.00 MGA" in result.output

    def test_registered_boutique_awaits_approval(self, run):
        run("boutique", "register", "--name", "New Shop", "--day", "lundi", "--collect")
        result = run("boutique", "show", "--id", "new-shop")
        assert "[en_attente]" in result.output


class TestOrderCommands:

    def test_checkout_accept_show(self, stocked):
        result = stocked("order", "checkout", "--client", "c1", "--method", "collect",
                         "--date", DELIVERY_DAY)
        assert "Order #1 created" in result.output
        assert "Retrait en entrepôt" in result.output

        result = stocked("order", "accept", "--id", "1",
                         "--role", "boutique", "--user", "u1", "--boutique", "b1")
        assert "status=en_preparation" in result.output

        result = stocked("order", "show", "--id", "1", "--user", "c1")
        assert "EN PREPARATION" in result.output
        assert "24000.00 MGA" in result.output

        result = stocked("order", "list", "--role", "admin")
        assert "CMD" in result.output

        result = stocked("notification", "list", "--user", "c1")
        assert "accepted" in result.output

    def test_eligibility(self, stocked):
        result = stocked("order", "eligibility", "--client", "c1", "--method", "collect",
                         "--date", DELIVERY_DAY)
        assert "is available" in result.output

    def test_supermarket_delivery_needs_address(self, stocked):
        result = stocked("order", "checkout", "--client", "c1",
                         "--method", "livraison_supermarche", "--date", DELIVERY_DAY,
                         expect_ok=False)
        assert result.exit_code == 1
        assert "delivery address" in result.output

    def test_other_client_cannot_cancel(self, stocked):
        stocked("order", "checkout", "--client", "c1", "--method", "collect",
                "--date", DELIVERY_DAY)
        result = stocked("order", "cancel", "--id", "1", "--user", "c2",
                         "--reason", "Not mine", expect_ok=False)
        assert result.exit_code == 1
        assert "Only the client who placed the order" in result.output

    def test_full_collect_flow(self, stocked):
        stocked("order", "checkout", "--client", "c1", "--method", "collect",
                "--date", DELIVERY_DAY)
        boutique = ("--role", "boutique", "--user", "u1", "--boutique", "b1")
        stocked("order", "accept", "--id", "1", *boutique)
        stocked("order", "mark-depot", "--id", "1", *boutique)
        stocked("order", "confirm-depot", "--id", "1", "--lot", "b1", "--role", "admin")

        result = stocked("order", "confirm-final", "--id", "1", "--user", "c1")
        assert "status=livree" in result.output
        assert "paid=paye" in result.output

    def test_checkout_with_empty_cart(self, run):
        result = run("order", "checkout", "--client", "nobody", "--method", "collect",
                     "--date", DELIVERY_DAY, expect_ok=False)
        assert result.exit_code == 1
        assert "cart is empty" in result.output


class TestStorageErrors:

    def test_corrupt_orders_file_is_reported(self, run, tmp_path):
        (tmp_path / "orders.json").write_text("{not json", encoding="utf-8")
        result = run("order", "list", "--role", "admin", expect_ok=False)
        assert result.exit_code == 1
        assert "Cannot read orders.json" in result.output
        assert isinstance(result.exception, SystemExit)

    def test_corrupt_products_file_is_reported(self, run, tmp_path):
        (tmp_path / "products.json").write_text("[", encoding="utf-8")
        result = run("product", "list", expect_ok=False)
        assert result.exit_code == 1
        assert "Cannot read products.json" in result.output
