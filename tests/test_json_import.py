import pytest

from src.slide_generation.errors import ValidationError
from src.slide_generation.json_import import document_from_json, parse_slides_json

SAMPLE = """[
  {"slideTitle": "The Blueprint Mindset", "slideText": "- Defining objectives\\n- Aligning goals"},
  {"slideTitle": "Why Objectives Matter", "slideText": "- Direction\\n- Assessment", "notes": "ignored"}
]"""


def test_parse_sample():
    slides = parse_slides_json(SAMPLE)

    assert [s.title for s in slides] == ["The Blueprint Mindset", "Why Objectives Matter"]
    assert slides[0].content == "- Defining objectives\n- Aligning goals"
    assert slides[0].id != slides[1].id


def test_document_gets_one_narration_entry_per_slide():
    document = document_from_json("  Course Design ", SAMPLE)

    assert document.title == "Course Design"
    assert [n.slide_number for n in document.narration] == [1, 2]
    assert all(n.text == "" and n.timestamp == "00:00" for n in document.narration)


@pytest.mark.parametrize(
    "raw, fragment",
    [
        ("{not json", "Invalid JSON"),
        ('{"slideTitle": "x"}', "array"),
        ('[{"slideTitle": "x"}]', "Slide 1"),
        ('[{"slideTitle": "x", "slideText": "y"}, {"slideText": "y"}]', "Slide 2"),
        ('[{"slideTitle": "x", "slideText": 5}]', "slideText"),
    ],
)
def test_rejects_bad_input(raw, fragment):
    with pytest.raises(ValidationError) as excinfo:
        parse_slides_json(raw)

    assert fragment in str(excinfo.value)
