from __future__ import annotations

from pathlib import Path

import pytest

from assessment_app.core.errors import LoadError
from assessment_app.core.models import QuestionKind
from assessment_app.core.quiz_importer import QuizImportError, load_quiz_from_file, parse_quiz_text

SAMPLE_QUIZ = """\
Q: What is Newton's First Law of Motion?
A: An object at rest stays at rest
B: Force equals mass times acceleration
C: Every action has an equal and opposite reaction
CORRECT: A

---

ID: earth-orbit
TYPE: TRUEFALSE
Q: The Earth revolves around the Sun.
CORRECT: TRUE

TYPE: ORDER
Q: Arrange the planets in order from the Sun:
ITEM: Mars
ITEM: Venus
ITEM: Earth
ITEM: Mercury
CORRECT: Mercury, Venus, Earth, Mars

TYPE: MATCH
Q: Match the scientists with their discoveries:
PAIR: Newton = Laws of Motion
PAIR: Einstein = Theory of Relativity
PAIR: Darwin = Evolution
"""


def test_parses_all_question_kinds():
    questions = parse_quiz_text(SAMPLE_QUIZ)

    assert [q.kind for q in questions] == [
        QuestionKind.SINGLE_CHOICE,
        QuestionKind.BOOLEAN,
        QuestionKind.ORDERED_ARRANGEMENT,
        QuestionKind.MATCHING_PAIRS,
    ]
    assert [q.id for q in questions] == ["q1", "earth-orbit", "q3", "q4"]
    assert questions[0].correct_option_index == 0
    assert len(questions[0].options) == 3
    assert questions[1].options == ("True", "False")
    assert questions[1].correct_option_index == 0
    assert questions[2].items == ("Mars", "Venus", "Earth", "Mercury")
    assert questions[2].correct_order == ("Mercury", "Venus", "Earth", "Mars")
    assert questions[3].correct_mapping["Darwin"] == "Evolution"


def test_multiline_prompt_is_joined():
    questions = parse_quiz_text("Q: First line\nsecond line\nA: x\nB: y\nCORRECT: B\n")
    assert questions[0].prompt == "First line\nsecond line"
    assert questions[0].correct_option_index == 1


@pytest.mark.parametrize(
    "text",
    [
        "Q: Missing answer key\nA: x\nB: y\n",
        "Q: Gap in letters\nA: x\nC: y\nCORRECT: A\n",
        "Q: Only one option\nA: x\nCORRECT: A\n",
        "Q: Letter out of range\nA: x\nB: y\nCORRECT: D\n",
        "TYPE: ESSAY\nQ: Unknown type\nCORRECT: A\n",
        "TYPE: MATCH\nQ: Bad pair\nPAIR: Newton\nCORRECT: x\n",
        "stray text\nQ: Hi\nA: x\nB: y\nCORRECT: A\n",
    ],
)
def test_malformed_blocks_raise(text):
    with pytest.raises(QuizImportError):
        parse_quiz_text(text)


def test_import_error_is_a_load_error():
    assert issubclass(QuizImportError, LoadError)


def test_empty_file_is_rejected(tmp_path: Path):
    quiz_file = tmp_path / "empty.txt"
    quiz_file.write_text("\n\n---\n", encoding="utf-8")
    with pytest.raises(QuizImportError):
        load_quiz_from_file(quiz_file)


def test_load_quiz_from_file_keeps_source_path(tmp_path: Path):
    quiz_file = tmp_path / "science.txt"
    quiz_file.write_text(SAMPLE_QUIZ, encoding="utf-8")
    imported = load_quiz_from_file(quiz_file)
    assert imported.source_path == quiz_file
    assert len(imported.questions) == 4


def test_order_item_with_comma_is_named_in_the_error():
    text = "TYPE: ORDER\nQ: Sort\nITEM: Paris, France\nITEM: Rome\nCORRECT: Rome, Paris, France\n"
    with pytest.raises(QuizImportError, match="Paris, France"):
        parse_quiz_text(text)
