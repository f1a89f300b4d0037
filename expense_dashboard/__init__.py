"""Top‑level package for the Expense Dashboard.

The primary modules are:

* ``models`` – categories, expenses and the canonical category reference
* ``api_client`` – the REST client for the expense backend
* ``data_processing`` – filtering, per-category totals and daily buckets
* ``services`` – snapshot-holding CRUD service used by the pages
* ``visualization`` – functions that generate Plotly figures

To run the dashboard from the command line you can execute:

```bash
streamlit run expense_dashboard/Home.py
```
"""

from . import data_processing  # noqa: F401  # re-exported for convenience
from . import models  # noqa: F401
from . import visualization  # noqa: F401

__all__ = ["data_processing", "models", "visualization"]
