"""Tests for template previews."""

from schemas.v1.models import MailTemplate
from template_preview import render_preview, template_variables
from tests.conftest import TEMPLATE_PAYLOAD


def make_template(**overrides) -> MailTemplate:
    payload = dict(TEMPLATE_PAYLOAD)
    payload.update(overrides)
    return MailTemplate.model_validate(payload)


class TestTemplateVariables:
    def test_finds_placeholders(self):
        content = "<p>{{firstName}} from {{ company }}</p>"
        assert template_variables(content) == ["company", "firstName"]

    def test_empty_content(self):
        assert template_variables(None) == []
        assert template_variables("") == []

    def test_unparsable_content(self):
        assert template_variables("{{ unclosed") == []


class TestRenderPreview:
    def test_substitutes_all_parts(self):
        preview = render_preview(make_template(), {"firstName": "Ann"})

        assert preview.subject == "Welcome, Ann"
        assert preview.html_content == "<h1>Hello, Ann!</h1>"
        assert preview.text_content == "Hello, Ann!"
        assert preview.variables == ["firstName"]
        assert preview.missing_variables == []

    def test_missing_placeholders_stay_visible(self):
        preview = render_preview(make_template())

        assert "{{ firstName }}" in preview.html_content
        assert preview.missing_variables == ["firstName"]

    def test_html_values_are_escaped(self):
        preview = render_preview(make_template(), {"firstName": "<script>"})

        assert "<script>" not in preview.html_content
        assert "&lt;script&gt;" in preview.html_content
        assert preview.text_content == "Hello, <script>!"

    def test_without_text_part(self):
        preview = render_preview(make_template(textContent=None), {"firstName": "Ann"})
        assert preview.text_content is None

    def test_sandbox_blocks_unsafe_access(self):
        template = make_template(htmlContent="{{ ''.__class__.__mro__ }}")

        preview = render_preview(template, {})

        assert "class '" not in preview.html_content
        assert "class &#39;" not in preview.html_content
