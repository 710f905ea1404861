from text_format import format_text_to_html


def test_empty_text():
    assert format_text_to_html("") == ""
    assert format_text_to_html(None) == ""


def test_html_is_escaped():
    out = format_text_to_html("<script>alert('x')</script>")
    assert "<script>" not in out
    assert out == "&lt;script&gt;alert(&#039;x&#039;)&lt;/script&gt;"


def test_inline_markup():
    assert format_text_to_html("**bold** and *it*") == "<strong>bold</strong> and <em>it</em>"
    assert format_text_to_html("__u__ ~~s~~") == "<u>u</u> <del>s</del>"
    assert format_text_to_html("`x = 1`") == '<code class="bg-gray-100 px-1 rounded text-sm">x = 1</code>'


def test_links_only_http():
    out = format_text_to_html("[Sitio](https://roatan.example.com)")
    assert out == (
        '<a href="https://roatan.example.com" target="_blank" '
        'rel="noopener noreferrer">Sitio</a>'
    )
    assert "<a" not in format_text_to_html("[x](javascript:alert(1))")


def test_newlines():
    assert format_text_to_html("a\nb\r\nc") == "a<br/>b<br/>c"
