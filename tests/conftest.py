"""Shared fixtures: small back-office datasets."""

import pytest

from dataview.models import FilterOption, FilterType, SelectOption


@pytest.fixture
def fee_rules():
    """10 fee rules, 6 of them active."""
    active = [True, True, False, True, False, True, True, False, True, False]
    return [
        {
            "id": i + 1,
            "name": f"Rule {i + 1}",
            "is_active": flag,
            "amount": (i + 1) * 10,
            "created_at": f"2024-0{(i % 9) + 1}-15T10:00:00Z",
            "paymentMethod": {"name": ["Card", "Bank", "Mobile"][i % 3]},
        }
        for i, flag in enumerate(active)
    ]


@pytest.fixture
def wallets():
    """12 wallets across user, group and system types."""
    rows = [
        ("user", "John Smith"),
        ("user", "Johnny Cash"),
        ("user", "Alice Doe"),
        ("user", "Mary Johnson"),
        ("group", "Johnson Family"),
        ("group", "Book Club"),
        ("group", "John's Team"),
        ("system", "Fees"),
        ("system", "Escrow"),
        ("system", "john-ops"),
        ("user", "Bob Stone"),
        ("user", None),
    ]
    return [
        {"id": f"w{i}", "type": t, "user": {"name": name}, "balance": i * 100.0}
        for i, (t, name) in enumerate(rows)
    ]


@pytest.fixture
def status_filter():
    return FilterOption(
        id="status",
        label="Status",
        type=FilterType.SELECT,
        options=[SelectOption(value="active", label="Active"),
                 SelectOption(value="inactive", label="Inactive")],
        accessor=lambda r: "active" if r.get("is_active") else "inactive",
    )


@pytest.fixture
def wallet_type_filter():
    return FilterOption(
        id="type",
        label="Wallet type",
        type=FilterType.SELECT,
        options=[SelectOption(value=v, label=v.title()) for v in ("user", "group", "system")],
    )
