from timelogs.richtext import NO_DESCRIPTION, clean_summary, clean_text, extract_comment_text


def _adf(*paragraphs):
    return {"type": "doc", "version": 1, "content": list(paragraphs)}


def test_hard_break_between_text_leaves_becomes_single_space():
    doc = _adf(
        {
            "type": "paragraph",
            "content": [
                {"type": "text", "text": "Reviewed MR"},
                {"type": "hardBreak"},
                {"type": "text", "text": "fixed tests"},
            ],
        }
    )
    assert extract_comment_text(doc) == "Reviewed MR fixed tests"


def test_nested_content_is_walked_depth_first():
    doc = _adf(
        {"type": "paragraph", "content": [{"type": "text", "text": "a"}]},
        {
            "type": "bulletList",
            "content": [
                {"type": "listItem", "content": [{"type": "paragraph", "content": [{"type": "text", "text": "b"}]}]},
                {"type": "listItem", "content": [{"type": "paragraph", "content": [{"type": "text", "text": "c"}]}]},
            ],
        },
    )
    assert extract_comment_text(doc) == "abc"


def test_plain_string_comment_is_returned_unchanged():
    assert extract_comment_text("Deployed to staging") == "Deployed to staging"


def test_empty_or_missing_comment_yields_sentinel():
    assert extract_comment_text(None) == NO_DESCRIPTION
    assert extract_comment_text("") == NO_DESCRIPTION
    assert extract_comment_text({}) == NO_DESCRIPTION
    assert extract_comment_text(_adf({"type": "paragraph", "content": []})) == NO_DESCRIPTION
    assert extract_comment_text({"type": "doc"}) == NO_DESCRIPTION


def test_clean_text_escapes_quotes_and_collapses_newlines():
    assert clean_text('said "done"\nthen\r\nleft') == 'said \\"done\\" then left'


def test_clean_summary_defaults_to_sentinel():
    assert clean_summary(None) == NO_DESCRIPTION
    assert clean_summary("") == NO_DESCRIPTION
