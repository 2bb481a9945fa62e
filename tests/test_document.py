"""
Unit tests for frontmatter and code block discovery.
"""
from core.document import find_blocks, split_frontmatter

DOCUMENT = """---
acj-commaAsDecimal: true
acj-journalSeparator: a
---
# March

```acj
2024-03-15,Purchase
600-1000
---
400-1000
```

Some text.

````acl
570
100
---
50
````

```python
print("not accounting")
```

~~~acjm
d,x
1-5
---
2-5
~~~
"""


def test_split_frontmatter():
    frontmatter, body = split_frontmatter(DOCUMENT)
    assert frontmatter == {"acj-commaAsDecimal": True, "acj-journalSeparator": "a"}
    assert body.startswith("# March")


def test_split_frontmatter_absent():
    assert split_frontmatter("# Title\n") == ({}, "# Title\n")


def test_split_frontmatter_invalid_yaml():
    frontmatter, body = split_frontmatter("---\nkey: [unclosed\n---\nbody")
    assert frontmatter == {}
    assert body == "body"


def test_split_frontmatter_not_a_mapping():
    frontmatter, body = split_frontmatter("---\n- a\n- b\n---\nbody")
    assert frontmatter == {}
    assert body == "body"


def test_find_blocks():
    blocks = find_blocks(DOCUMENT)

    assert [block.kind for block in blocks] == ["acj", "acl", "acjm"]
    assert blocks[0].source == "2024-03-15,Purchase\n600-1000\n---\n400-1000\n"
    assert blocks[1].source == "570\n100\n---\n50\n"
    assert blocks[2].source == "d,x\n1-5\n---\n2-5\n"


def test_find_blocks_offsets_cover_fences():
    block = find_blocks(DOCUMENT)[0]
    assert DOCUMENT[block.start:block.end].startswith("```acj\n")
    assert DOCUMENT[block.start:block.end].endswith("```")


def test_find_blocks_ignores_other_languages():
    assert find_blocks("```acjx\n1\n```\n```python\nx\n```\n") == []


def test_find_blocks_empty_block():
    blocks = find_blocks("```acl\n```\n")
    assert len(blocks) == 1
    assert blocks[0].source == ""
