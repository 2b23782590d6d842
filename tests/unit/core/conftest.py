"""Shared fixtures for core unit tests"""

import pytest


SAMPLE_POST = """\
---
title: Sample
published: 2024-03-05T12:30:00+01:00
tags: [ignored, field]
---

A paragraph with **bold** text.

```python
print("hello")
```
"""


@pytest.fixture(name="sample_post")
def sample_post_fixture():
    return SAMPLE_POST
