from deckquiz.cloze import BLANK, ClozeContent, extract_cloze, strip_markup


def test_single_cloze_becomes_blank_and_answer() -> None:
    content = extract_cloze('<span class="cloze" data-cloze="Paris">[...]</span> is the capital')
    assert content == ClozeContent(question="_____ is the capital", answer="Paris")


def test_no_cloze_gives_empty_answer_and_stripped_question() -> None:
    content = extract_cloze("<div><b>What</b> is <i>2 + 2</i>?</div>")
    assert content.answer == ""
    assert content.question == "What is 2 + 2?"


def test_style_block_does_not_leak() -> None:
    markup = (
        "<style>.card { font-family: arial; color: black; }</style>"
        '<div>The <span class="cloze" data-cloze="mitochondria">[...]</span> is the powerhouse</div>'
    )
    content = extract_cloze(markup)
    assert content.question == f"The {BLANK} is the powerhouse"
    assert "font-family" not in content.question
    assert content.answer == "mitochondria"


def test_first_cloze_provides_answer_and_all_placeholders_blank() -> None:
    markup = (
        '<span class="cloze" data-cloze="Ottawa">[...]</span> is the capital of '
        '<span class="cloze" data-cloze="Canada">[...]</span>'
    )
    content = extract_cloze(markup)
    assert content.question == f"{BLANK} is the capital of {BLANK}"
    assert content.answer == "Ottawa"


def test_answer_attribute_markup_is_stripped() -> None:
    markup = '<span class="cloze" data-cloze="&lt;b&gt;H&lt;sub&gt;2&lt;/sub&gt;O&lt;/b&gt;">[...]</span> is water'
    assert extract_cloze(markup).answer == "H2O"


def test_cloze_hint_is_blanked_too() -> None:
    markup = '<span class="cloze" data-cloze="1066">[year]</span> Battle of Hastings'
    content = extract_cloze(markup)
    assert content.question == "_____ Battle of Hastings"
    assert content.answer == "1066"


def test_cloze_without_answer_attribute() -> None:
    content = extract_cloze('<span class="cloze">[...]</span> sits on the mat')
    assert content == ClozeContent(question=f"{BLANK} sits on the mat", answer="")


def test_whitespace_and_line_breaks_collapse() -> None:
    content = extract_cloze("  Line one<br>\n\n  line   two  ")
    assert content.question == "Line one line two"


def test_empty_markup() -> None:
    assert extract_cloze("") == ClozeContent(question="", answer="")
    assert strip_markup("") == ""
