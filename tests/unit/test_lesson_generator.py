"""Unit tests for slug, front matter and lesson file generation."""

import itertools
from unittest.mock import MagicMock

import pytest
import yaml

from lessongen.config import GeneratorConfig
from lessongen.errors import FileWriteError, NetworkError
from lessongen.generators.lesson_generator import (
    LessonGenerator,
    build_filename,
    build_front_matter,
    build_image_url,
    extract_image_keyword,
    render_document,
    render_front_matter,
    slugify,
)
from lessongen.utils.file_io import split_front_matter
from lessongen.validators.schema import LessonFrontMatter, OutlineEntry


class TestSlugify:
    """Test title-to-slug conversion."""

    @pytest.mark.parametrize(
        "title,expected",
        [
            ("小小工程师", "小小工程师"),
            ("Hello World", "hello-world"),
            ("  Water -- Cycle!! ", "water-cycle"),
            ("物质的变化 (Part 2)", "物质的变化-part-2"),
            ("CO2 & H2O", "co2-h2o"),
            ("Ünïcode Café", "n-code-caf"),
        ],
    )
    def test_examples(self, title, expected):
        assert slugify(title) == expected

    @pytest.mark.parametrize("title", ["!!!", "   ", "", "—— · ——", "🌍🚀"])
    def test_symbol_only_title_falls_back(self, title):
        assert slugify(title) == "lesson"

    def test_truncated_to_48(self):
        slug = slugify("a" * 100)

        assert slug == "a" * 48

    def test_truncation_does_not_leave_trailing_hyphen(self):
        title = "a" * 47 + " b"

        assert slugify(title) == "a" * 47

    @pytest.mark.parametrize(
        "title",
        [
            "小小工程师",
            "Hello, World!",
            "a" * 47 + " bcd",
            "Ünïcode Café",
            "!!!",
            "生物的多样性 -- Biodiversity 101",
            "x-" * 40,
        ],
    )
    def test_idempotent(self, title):
        once = slugify(title)

        assert slugify(once) == once


class TestBuildFilename:
    def test_zero_padded_order(self):
        entry = OutlineEntry(order=1, title="小小工程师")

        assert build_filename(entry) == "01-小小工程师.md"

    def test_three_digit_order(self):
        entry = OutlineEntry(order=123, title="Big")

        assert build_filename(entry) == "123-big.md"

    def test_placeholder_slug(self):
        entry = OutlineEntry(order=7, title="???")

        assert build_filename(entry) == "07-lesson.md"


class TestExtractImageKeyword:
    """Test pulling the `unsplash:` line out of a completion."""

    def test_trailing_marker_line(self):
        text = "## 练一练\n答案：B\nunsplash: science experiment kids\n打印版提示：A4 纸打印\n"

        keyword, body = extract_image_keyword(text)

        assert keyword == "science experiment kids"
        assert "unsplash" not in body
        assert body == "## 练一练\n答案：B\n打印版提示：A4 纸打印\n"

    def test_case_insensitive(self):
        keyword, body = extract_image_keyword("body\nUnsplash:  Solar System \n")

        assert keyword == "Solar System"
        assert body == "body\n"

    def test_marker_at_end_without_newline(self):
        keyword, body = extract_image_keyword("body\nunsplash: rocks")

        assert keyword == "rocks"
        assert body == "body\n"

    def test_quoted_keyword(self):
        keyword, _ = extract_image_keyword('x\nunsplash: "plant cells"\n')

        assert keyword == "plant cells"

    def test_emphasis_around_marker(self):
        keyword, body = extract_image_keyword("x\n**unsplash:** magnets\n")

        assert keyword == "magnets"
        assert body == "x\n"

    @pytest.mark.parametrize(
        "line",
        [
            "- unsplash: science experiment kids",
            "> unsplash: science experiment kids",
            "图片：unsplash: science experiment kids",
        ],
    )
    def test_marker_after_line_prefix(self, line):
        text = f"## 练一练\n答案：B\n{line}\n"

        keyword, body = extract_image_keyword(text)

        assert keyword == "science experiment kids"
        assert body == "## 练一练\n答案：B\n"

    def test_no_marker(self):
        text = "## 预习目标\n内容\n"

        assert extract_image_keyword(text) == (None, text)

    def test_empty_keyword_removes_line(self):
        keyword, body = extract_image_keyword("x\nunsplash:\ny\n")

        assert keyword is None
        assert body == "x\ny\n"


class TestBuildImageUrl:
    def test_encoded_keyword_and_sig(self):
        url = build_image_url("science experiment kids", 1)

        assert url == "https://source.unsplash.com/featured/?science%20experiment%20kids&sig=1"

    def test_reserved_characters_encoded(self):
        url = build_image_url("a&b=c/d", 12)

        assert url.endswith("?a%26b%3Dc%2Fd&sig=12")

    def test_custom_template(self):
        url = build_image_url("moon", 3, "https://img.example/{keyword}?v={order}")

        assert url == "https://img.example/moon?v=3"


class TestFrontMatter:
    """Test field selection, ordering and YAML rendering."""

    @pytest.mark.parametrize(
        "has_unit,has_keywords,has_image",
        list(itertools.product([False, True], repeat=3)),
    )
    def test_field_order_for_all_combinations(self, has_unit, has_keywords, has_image):
        entry = OutlineEntry(
            order=4,
            title="宇宙",
            unit="宇宙" if has_unit else "",
            keywords=["行星"] if has_keywords else [],
        )
        image = "https://img.example/x" if has_image else None

        expected = ["title"]
        if has_unit:
            expected.append("unit")
        expected.append("order")
        if has_keywords:
            expected.append("keywords")
        if has_image:
            expected.append("image")

        fields = build_front_matter(entry, image)
        assert list(fields) == expected

        rendered_keys = [line.split(":", 1)[0] for line in render_front_matter(fields).splitlines()]
        assert rendered_keys == expected

    def test_rendered_format(self):
        fields = {
            "title": "小小工程师",
            "unit": "小小工程师",
            "order": 1,
            "keywords": ["设计", "材料"],
        }

        assert render_front_matter(fields) == (
            'title: "小小工程师"\n'
            'unit: "小小工程师"\n'
            "order: 1\n"
            'keywords: ["设计", "材料"]\n'
        )

    @pytest.mark.parametrize(
        "title",
        [
            'Say "hello"',
            "Ratio: 1:2",
            "back\\slash",
            "multi\nline",
            "# not a comment",
            "- dash",
            "yes",
            "123",
        ],
    )
    def test_special_characters_round_trip(self, title):
        """Test that YAML escaping preserves titles exactly."""
        entry = OutlineEntry(order=2, title=title, keywords=['k"1', "k: 2"])

        text = render_front_matter(build_front_matter(entry))
        data = yaml.safe_load(text)

        assert data["title"] == title
        assert data["keywords"] == ['k"1', "k: 2"]
        assert data["order"] == 2

    def test_long_values_not_wrapped(self):
        title = "很长的标题" * 40

        text = render_front_matter({"title": title, "order": 1})

        assert len(text.splitlines()) == 2

    def test_render_document_layout(self):
        document = render_document({"title": "T", "order": 1}, "\n\n## 预习目标\n内容\n\n\n")

        assert document == '---\ntitle: "T"\norder: 1\n---\n\n## 预习目标\n内容\n'


class TestLessonGenerator:
    """Test LessonGenerator with a mocked completion client."""

    def _config(self, tmp_path, **kwargs):
        return GeneratorConfig(output_dir=tmp_path / "lessons", **kwargs)

    def test_generate_writes_lesson(self, tmp_path, sample_body):
        llm_client = MagicMock()
        llm_client.complete.return_value = sample_body + "unsplash: paper tower\n"
        generator = LessonGenerator(self._config(tmp_path), llm_client)
        entry = OutlineEntry(order=2, title="Paper Tower", keywords=["结构"])

        path = generator.generate(entry)

        assert path == tmp_path / "lessons" / "02-paper-tower.md"
        front_matter, body = split_front_matter(path.read_text(encoding="utf-8"))
        data = yaml.safe_load(front_matter)
        assert data == {
            "title": "Paper Tower",
            "order": 2,
            "keywords": ["结构"],
            "image": "https://source.unsplash.com/featured/?paper%20tower&sig=2",
        }
        LessonFrontMatter.model_validate(data)
        assert "unsplash" not in body
        assert body.startswith("\n## 预习目标")
        assert body.endswith("答案：B\n")

        prompt = llm_client.complete.call_args.args[0]
        assert "- 课题：Paper Tower" in prompt

    def test_no_image_when_keyword_missing(self, tmp_path, sample_body):
        llm_client = MagicMock()
        llm_client.complete.return_value = sample_body
        generator = LessonGenerator(self._config(tmp_path), llm_client)

        path = generator.generate(OutlineEntry(order=1, title="t"))

        assert "image:" not in path.read_text(encoding="utf-8")

    def test_extraction_disabled_keeps_body(self, tmp_path):
        """Test the simple variant: marker line stays, no image field."""
        llm_client = MagicMock()
        llm_client.complete.return_value = "## 预习目标\nunsplash: rocks\n"
        generator = LessonGenerator(
            self._config(tmp_path, extract_image_keyword=False), llm_client
        )

        path = generator.generate(OutlineEntry(order=1, title="t"))

        content = path.read_text(encoding="utf-8")
        assert "image:" not in content
        assert content.endswith("## 预习目标\nunsplash: rocks\n")
        assert "unsplash" not in llm_client.complete.call_args.args[0]

    def test_overwrites_existing_file(self, tmp_path):
        llm_client = MagicMock()
        llm_client.complete.return_value = "new body"
        generator = LessonGenerator(self._config(tmp_path), llm_client)
        entry = OutlineEntry(order=1, title="t")
        target = generator.output_path(entry)
        target.parent.mkdir(parents=True)
        target.write_text("old content", encoding="utf-8")

        generator.generate(entry)

        assert target.read_text(encoding="utf-8").endswith("\nnew body\n")

    def test_write_failure_raises_file_write_error(self, tmp_path):
        blocker = tmp_path / "lessons"
        blocker.write_text("not a directory")
        generator = LessonGenerator(self._config(tmp_path), MagicMock())

        with pytest.raises(FileWriteError) as exc_info:
            generator.write_lesson(OutlineEntry(order=1, title="t"), "body")

        assert "01-t.md" in str(exc_info.value)

    def test_completion_error_propagates(self, tmp_path):
        llm_client = MagicMock()
        llm_client.complete.side_effect = NetworkError(503, "Service Unavailable", "down")
        generator = LessonGenerator(self._config(tmp_path), llm_client)

        with pytest.raises(NetworkError):
            generator.generate(OutlineEntry(order=1, title="t"))

        assert not (tmp_path / "lessons").exists()

    def test_generate_requires_client(self, tmp_path):
        generator = LessonGenerator(self._config(tmp_path))

        with pytest.raises(RuntimeError):
            generator.generate(OutlineEntry(order=1, title="t"))
