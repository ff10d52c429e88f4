"""Root test configuration: shared sample documents"""

import pytest


SAMPLE_MD = """\
---
title: Scales
tags: [music]
---

# Scales

Intro paragraph.

```music-abc
X:1
T:C major
K:C
CDEF GABc|
```

<meta-aside class="card wide">
<p>Side <em>note</em></p>
</meta-aside>

```python
print("not music")
```

Outro paragraph.
"""


@pytest.fixture(name="sample_md")
def sample_md_fixture():
    return SAMPLE_MD


@pytest.fixture(name="sample_file")
def sample_file_fixture(tmp_path):
    f = tmp_path / "scales.md"
    f.write_text(SAMPLE_MD, encoding="utf-8")
    return f
