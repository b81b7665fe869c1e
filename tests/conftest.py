"""Root test configuration: sample literate documents shared by all suites"""

import pytest


SAMPLE_DOC = """\
---
coil:
  options:
    keep_indentation: false
  files:
    main: src/main.py
    readme: README.txt
---

Some prose that is never parsed as structure.

```python main
    def main():
        return 0
```

More prose with a [link](https://example.com) and *emphasis*.

```text readme
  Hello from coil.
```
"""


def make_doc(files: dict[str, str], blocks: list[tuple[str, str]], keep_indentation: bool = False) -> str:
    """Build a document with the given file bindings and (info, content) fenced blocks."""
    lines = ["---", "coil:", "  options:", f"    keep_indentation: {str(keep_indentation).lower()}"]
    if files:
        lines.append("  files:")
        lines += [f"    {key}: {path}" for key, path in files.items()]
    else:
        lines.append("  files: {}")
    lines.append("---")
    text = "\n".join(lines) + "\n"
    for info, content in blocks:
        text += f"\n```{info}\n{content}```\n"
    return text


@pytest.fixture(name="sample_doc")
def sample_doc_fixture():
    return SAMPLE_DOC


@pytest.fixture(name="doc_factory")
def doc_factory_fixture():
    return make_doc
