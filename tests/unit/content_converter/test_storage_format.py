"""Unit tests for storage_format module."""

from obsidian_confluence.content_converter.storage_format import (
    attachment_image_markup,
    replace_attachment_placeholders,
)


class TestReplaceAttachmentPlaceholders:
    """Test cases for replace_attachment_placeholders."""

    def test_placeholder_image_becomes_ac_image(self):
        xhtml = '<p><img src="confluence-attachment://pic.png" /></p>'

        assert replace_attachment_placeholders(xhtml) == (
            '<p><ac:image><ri:attachment ri:filename="pic.png" /></ac:image></p>'
        )

    def test_alt_text_carried_over(self):
        xhtml = '<img src="confluence-attachment://pic.png" alt="A &amp; B" />'

        assert replace_attachment_placeholders(xhtml) == (
            '<ac:image ac:alt="A &amp; B"><ri:attachment ri:filename="pic.png" /></ac:image>'
        )

    def test_filename_unquoted_and_escaped(self):
        xhtml = '<img src="confluence-attachment://a%20%26%20b.png" alt="" />'

        assert 'ri:filename="a &amp; b.png"' in replace_attachment_placeholders(xhtml)

    def test_other_images_untouched(self):
        xhtml = '<img src="https://example.com/x.png" alt="x" />'

        assert replace_attachment_placeholders(xhtml) == xhtml

    def test_attachment_image_markup_without_alt(self):
        assert attachment_image_markup('x.png') == (
            '<ac:image><ri:attachment ri:filename="x.png" /></ac:image>'
        )
