"""Shared fixtures for core unit tests"""

import pytest


SAMPLE_MSG = """\
## 💰 Budget

Total is **12 000 €** for the [kitchen](/projects/7).

- Deposit `30%`
  due at signature
- Balance

```budget-summary
{"ttc": 12000, "hint": "Two quotes linked"}
```

```python
print("hello")
```

> Keep a reserve
> for surprises.
"""


@pytest.fixture(name="sample_msg")
def sample_msg_fixture():
    return SAMPLE_MSG
