"""Top-level package for the event budget planner.

The planner keeps, for every budget item of an event, a schedule of
installments and the payments made against it. The primary modules are:

* ``budgets`` – installment splitting, payment allocation, validation,
  schedule transitions, overview tables and storage
* ``dates`` – calendar helpers and the injectable clock
* ``config`` – paths, tolerances and logging setup

Helper scripts live in ``scripts/``:

```bash
python scripts/show_budget_schedule.py flowers
python scripts/validate_budgets.py
```
"""

from . import budgets  # noqa: F401  # re-exported for convenience
from . import config  # noqa: F401
from . import dates  # noqa: F401

__all__ = ["budgets", "config", "dates"]
