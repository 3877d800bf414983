"""Model validation tests."""

import json
import unittest
from datetime import datetime, timezone

from pydantic import ValidationError

from deckflow.models import (
    LessonBreak,
    ParsedPresentation,
    ParsedSlide,
    PresentationProgress,
    PresentationRecord,
    ProgressUpdate,
    QuizContent,
    QuizQuestion,
    SlideResource,
    SlideShape,
    TextParagraph,
    TextRun,
    reward_points,
)


def quiz_resource(resource_id: str = "quiz-1", after: int = 1, **overrides) -> SlideResource:
    data = {
        "id": resource_id,
        "type": "quiz",
        "title": "Check your understanding",
        "showAfterSlide": after,
        "content": {
            "questions": [
                {"id": "q1", "question": "2 + 2?", "options": ["3", "4"], "correctAnswer": 1},
                {"id": "q2", "question": "Capital of France?", "options": ["Paris", "Rome"], "correctAnswer": 0},
            ],
        },
    }
    data.update(overrides)
    return SlideResource.model_validate(data)


class TestSlideModels(unittest.TestCase):
    def test_paragraph_text_joins_runs(self) -> None:
        paragraph = TextParagraph(runs=[TextRun(text="Hello, "), TextRun(text="world", bold=True)])
        self.assertEqual(paragraph.text, "Hello, world")

    def test_text_shape_requires_content(self) -> None:
        with self.assertRaises(ValidationError):
            SlideShape(type="text", x=0, y=0, width=10, height=10, image_src="sha256:abc")

    def test_image_shape_rejects_content(self) -> None:
        with self.assertRaises(ValidationError):
            SlideShape(
                type="image",
                x=0,
                y=0,
                width=10,
                height=10,
                image_src="sha256:abc",
                content=[TextParagraph()],
            )

    def test_shape_geometry_bounded(self) -> None:
        with self.assertRaises(ValidationError):
            SlideShape(type="image", x=0, y=0, width=120, height=10, image_src="sha256:abc")

    def test_presentation_checks_slide_indexes(self) -> None:
        with self.assertRaises(ValidationError):
            ParsedPresentation(
                total_slides=2,
                slides=[ParsedSlide(index=1, title="A"), ParsedSlide(index=3, title="B")],
            )
        with self.assertRaises(ValidationError):
            ParsedPresentation(total_slides=3, slides=[ParsedSlide(index=1, title="A")])

    def test_slide_lookup_is_one_based(self) -> None:
        presentation = ParsedPresentation(
            total_slides=2,
            slides=[ParsedSlide(index=1, title="A"), ParsedSlide(index=2, title="B")],
        )
        self.assertEqual(presentation.slide(2).title, "B")
        with self.assertRaises(IndexError):
            presentation.slide(0)
        with self.assertRaises(IndexError):
            presentation.slide(3)

    def test_thumbnails_fall_back_to_picture_shapes(self) -> None:
        picture = SlideShape(type="image", x=0, y=0, width=50, height=50, image_src="sha256:pic")
        presentation = ParsedPresentation(
            total_slides=3,
            slides=[
                ParsedSlide(index=1, title="A", images=["sha256:inline"]),
                ParsedSlide(index=2, title="B", shapes=[picture], layout="custom"),
                ParsedSlide(index=3, title="C"),
            ],
        )
        self.assertEqual(presentation.thumbnails, ["sha256:inline", "sha256:pic", None])

    def test_parsed_slide_is_frozen(self) -> None:
        slide = ParsedSlide(index=1, title="A")
        with self.assertRaises(ValidationError):
            slide.title = "B"

    def test_json_uses_camel_case_and_sorted_keys(self) -> None:
        slide = ParsedSlide(index=1, title="A", background_color="#FFFFFF")
        payload = json.loads(slide.to_json())
        self.assertIn("backgroundColor", payload)
        self.assertNotIn("background_color", payload)
        self.assertEqual(list(payload), sorted(payload))


class TestResourceModels(unittest.TestCase):
    def test_show_before_slide_defaults_to_next_slide(self) -> None:
        resource = quiz_resource(after=4)
        self.assertEqual(resource.show_before_slide, 5)
        self.assertTrue(resource.is_active_at(4))
        self.assertFalse(resource.is_active_at(5))
        self.assertFalse(resource.is_active_at(3))

    def test_show_before_slide_must_follow_anchor(self) -> None:
        with self.assertRaises(ValidationError):
            quiz_resource(after=2, showBeforeSlide=4)
        self.assertEqual(quiz_resource(after=2, showBeforeSlide=3).show_before_slide, 3)

    def test_content_kind_must_match_type(self) -> None:
        with self.assertRaises(ValidationError):
            SlideResource.model_validate(
                {
                    "id": "r1",
                    "type": "audio",
                    "title": "Listen",
                    "showAfterSlide": 0,
                    "content": {"kind": "video", "videoUrl": "https://example.com/v.mp4"},
                }
            )

    def test_kind_is_taken_from_type(self) -> None:
        resource = SlideResource.model_validate(
            {
                "id": "r1",
                "type": "video",
                "title": "Watch",
                "showAfterSlide": 0,
                "content": {"videoUrl": "https://example.com/v.mp4"},
            }
        )
        self.assertEqual(resource.content.kind, "video")
        self.assertEqual(resource.content.video_url, "https://example.com/v.mp4")

    def test_blank_title_rejected(self) -> None:
        with self.assertRaises(ValidationError):
            quiz_resource(title="   ")

    def test_correct_answer_must_index_options(self) -> None:
        with self.assertRaises(ValidationError):
            QuizQuestion(id="q", question="?", options=["a", "b"], correct_answer=2)

    def test_quiz_needs_two_options_and_one_question(self) -> None:
        with self.assertRaises(ValidationError):
            QuizQuestion(id="q", question="?", options=["only"], correct_answer=0)
        with self.assertRaises(ValidationError):
            QuizContent(questions=[])

    def test_quiz_score_and_passing(self) -> None:
        content = quiz_resource().content
        self.assertEqual(content.score([1, 0]), 100)
        self.assertEqual(content.score([1, 1]), 50)
        self.assertEqual(content.score([None, None]), 0)
        self.assertTrue(content.passed([1, 0]))
        self.assertFalse(content.passed([1, 1]))

    def test_quiz_score_rounds_half_up(self) -> None:
        questions = [
            QuizQuestion(id=f"q{i}", question="?", options=["a", "b"], correct_answer=0)
            for i in range(8)
        ]
        content = QuizContent(questions=questions)
        # 5 of 8 = 62.5%
        self.assertEqual(content.score([0, 0, 0, 0, 0, 1, 1, 1]), 63)

    def test_reward_points(self) -> None:
        quiz = quiz_resource()
        self.assertEqual(reward_points(quiz), 25)
        self.assertEqual(reward_points(quiz, passed=False), 0)
        flashcards = SlideResource(
            id="f1",
            type="flashcard",
            title="Vocabulary",
            show_after_slide=1,
            content={"kind": "flashcard", "cards": [{"id": "c1", "front": "hola", "back": "hello"}]},
        )
        self.assertEqual(reward_points(flashcards), 15)

    def test_lesson_break_number_starts_at_two(self) -> None:
        with self.assertRaises(ValidationError):
            LessonBreak(id="b1", after_slide=3, lesson_number=1)


class TestProgressAndRecord(unittest.TestCase):
    def test_progress_keeps_snake_case(self) -> None:
        progress = PresentationProgress(current_slide=3, slides_viewed={1, 2, 3})
        payload = progress.to_dict()
        self.assertEqual(payload["current_slide"], 3)
        self.assertIn("time_spent_seconds", payload)

    def test_progress_update_accepts_camel_case(self) -> None:
        update = ProgressUpdate.model_validate({"currentSlide": 2, "slideViewed": 2, "timeSpent": 4})
        self.assertEqual(update.current_slide, 2)
        self.assertEqual(update.time_spent, 4)

    def test_record_roundtrip_json(self) -> None:
        record = PresentationRecord(
            id="pptx-1",
            file_name="deck.pptx",
            total_slides=2,
            uploaded_at=datetime(2024, 1, 1, tzinfo=timezone.utc),
            resources=[quiz_resource(after=1)],
            lesson_breaks=[LessonBreak(id="b1", after_slide=1, lesson_number=2)],
            slides=[ParsedSlide(index=1, title="A"), ParsedSlide(index=2, title="B")],
        )
        round_tripped = PresentationRecord.model_validate_json(record.to_json())
        self.assertEqual(round_tripped, record)
        self.assertEqual(round_tripped.presentation().total_slides, 2)


if __name__ == "__main__":
    unittest.main()
