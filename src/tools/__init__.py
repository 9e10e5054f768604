from tools.budget import alerts, month_state, rollover  # noqa: F401
from tools.currency import convert  # noqa: F401
from tools.debt import payoff  # noqa: F401
from tools.goals import report  # noqa: F401
from tools.income import estimate, paydays  # noqa: F401
from tools.net_worth import current, snapshot, timeline  # noqa: F401
from tools.reports import budget_vs_spent, spending  # noqa: F401
from tools.subscriptions import summary, upcoming_renewals  # noqa: F401
