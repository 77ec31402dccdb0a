"""Tests for Jinja2 template utilities."""

import pytest

from batinh.domain.entities import Star
from batinh.infrastructure.llm.templates import create_jinja_env, format_phone, star_name


class TestFormatPhone:
    """format_phone tests."""

    @pytest.mark.parametrize(
        ("number", "expected"),
        [
            ("0912345678", "0912 345 678"),
            ("01234567890", "0123 456 7890"),
            ("12345", "12345"),
        ],
    )
    def test_grouping(self, number: str, expected: str) -> None:
        """10 and 11 digit numbers are grouped; others are unchanged."""
        assert format_phone(number) == expected


class TestStarName:
    """star_name tests."""

    def test_accepts_enum_and_value(self) -> None:
        """Both Star members and their values are accepted."""
        assert star_name(Star.TUYET_MENH) == "Tuyệt Mệnh"
        assert star_name("SINH_KHI") == "Sinh Khí"


class TestCreateJinjaEnv:
    """create_jinja_env tests."""

    def test_filters_registered(self) -> None:
        """Custom filters are available in templates."""
        env = create_jinja_env()
        template = env.from_string("{{ n | format_phone }} {{ s | star_name }}")

        assert template.render(n="0912345678", s=Star.THIEN_Y) == (
            "0912 345 678 Thiên Y"
        )

    def test_packaged_templates_not_escaped(self) -> None:
        """Prompt templates render quotes, ampersands and brackets as typed."""
        env = create_jinja_env()
        template = env.get_template("general_info.j2")

        rendered = template.render(
            question='"A" & <B>', auspicious_stars=[], inauspicious_stars=[]
        )

        assert rendered.startswith('Người dùng hỏi: ""A" & <B>"')
        assert "&amp;" not in rendered
        assert "&#34;" not in rendered
