"""
Net worth from account balances, monthly snapshots and chart timelines.

Liability balances are stored as the positive amount owed, so net worth is
simply assets minus liabilities.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime
from typing import Iterable, Optional

from domain.models import ASSET_ACCOUNT_TYPES
from domain.schemas import (
    Account,
    AccountBalanceEntry,
    AccountBreakdownLine,
    NetWorthResult,
    NetWorthSnapshot,
    NetWorthTimelinePoint,
)

logger = logging.getLogger(__name__)


def is_asset_account(account: Account) -> bool:
    return account.type in ASSET_ACCOUNT_TYPES


def calculate_net_worth(accounts: Iterable[Account]) -> NetWorthResult:
    assets = 0
    liabilities = 0
    breakdown: list[AccountBreakdownLine] = []

    for account in accounts:
        if not account.is_active:
            continue
        is_asset = is_asset_account(account)
        if is_asset:
            assets += account.balance
        else:
            liabilities += account.balance
        breakdown.append(
            AccountBreakdownLine(
                account_id=account.id,
                account_name=account.name,
                type=account.type,
                balance=account.balance,
                is_asset=is_asset,
            )
        )

    return NetWorthResult(
        assets=assets,
        liabilities=liabilities,
        net_worth=assets - liabilities,
        account_breakdown=breakdown,
    )


def build_net_worth_timeline(snapshots: Iterable[NetWorthSnapshot]) -> list[NetWorthTimelinePoint]:
    # YYYY-MM is zero padded, so string order is chronological order.
    ordered = sorted(snapshots, key=lambda s: s.month)
    return [
        NetWorthTimelinePoint(month=s.month, assets=s.assets, liabilities=s.liabilities, net_worth=s.net_worth)
        for s in ordered
    ]


def serialize_account_balances(result: NetWorthResult) -> str:
    entries = [
        AccountBalanceEntry(id=line.account_id, balance=line.balance, is_asset=line.is_asset).model_dump(by_alias=True)
        for line in result.account_breakdown
    ]
    return json.dumps(entries, separators=(",", ":"))


def capture_snapshot(
    accounts: Iterable[Account],
    month: str,
    snapshot_id: Optional[str] = None,
    created_at: Optional[datetime] = None,
) -> NetWorthSnapshot:
    """
    Freeze today's balances as the snapshot for `month`.

    Only one snapshot per month is intended; replacing an existing one is the
    storage layer's job (upsert by month).
    """
    result = calculate_net_worth(accounts)
    snapshot = NetWorthSnapshot(
        id=snapshot_id or f"nw_{month}",
        month=month,
        assets=result.assets,
        liabilities=result.liabilities,
        net_worth=result.net_worth,
        account_balances=serialize_account_balances(result),
        created_at=created_at,
    )
    logger.info(
        "Net worth snapshot captured month=%s accounts=%d net_worth=%d",
        month,
        len(result.account_breakdown),
        result.net_worth,
    )
    return snapshot


def parse_account_balances(snapshot: NetWorthSnapshot) -> list[AccountBalanceEntry]:
    if not snapshot.account_balances:
        return []
    return [AccountBalanceEntry.model_validate(item) for item in json.loads(snapshot.account_balances)]
