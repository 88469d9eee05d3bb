"""Tests for prompt templates."""

from __future__ import annotations

from prompts import (
    COLLEGE_PROMPTS,
    SAMPLE_PAPER_INSTRUCTIONS,
    concept_gate_prompt,
    document_analysis_prompt,
    flashcard_prompt,
    podcast_prompt,
    quiz_prompt,
    rag_quiz_prompt,
    remedial_prompt,
    sample_paper_content,
    short_podcast_prompt,
    timetable_prompt,
    with_document_context,
    youtube_analysis_prompt,
)


class TestChatPrompts:
    def test_document_context_wrapping(self):
        text = with_document_context("What is osmosis?", "notes " * 3000)
        assert text.startswith("[DOCUMENT CONTEXT]\n")
        assert text.endswith("[STUDENT QUESTION]\nWhat is osmosis?")
        body = text.split("\n\n[STUDENT QUESTION]")[0][len("[DOCUMENT CONTEXT]\n"):]
        assert len(body) == 8000


class TestQuizPrompt:
    def test_basic_fields(self):
        prompt = quiz_prompt({"subject": "Physics", "questionCount": 5, "difficulty": "hard", "questionType": "mcq"})
        assert "Subject: Physics" in prompt
        assert "Number of Questions: 5" in prompt
        assert "Difficulty: hard" in prompt
        assert "Multiple Choice Questions with 4 options each" in prompt
        assert '"subject": "Physics"' in prompt

    def test_exam_pattern_and_weak_topics(self):
        prompt = quiz_prompt({
            "subject": "Biology",
            "questionCount": 10,
            "board": "NEET",
            "weakTopics": ["Genetics", "Ecology"],
            "chapters": ["Cell"],
            "classLevel": "12",
        })
        assert "NEET pattern" in prompt
        assert "weak in these specific topics: Genetics, Ecology" in prompt
        assert "Chapters/Topics: Cell" in prompt
        assert "Class: 12" in prompt

    def test_adaptive_difficulty(self):
        prompt = quiz_prompt({"subject": "Math", "questionCount": 3, "difficulty": "adaptive"})
        assert "Start easy, gradually increase difficulty" in prompt

    def test_unknown_board_has_no_pattern(self):
        prompt = quiz_prompt({"subject": "Math", "questionCount": 3, "board": "IB"})
        assert "Exam Pattern" not in prompt

    def test_reference_content_truncated(self):
        prompt = quiz_prompt({"subject": "Math", "questionCount": 3, "content": "x" * 5000})
        assert "x" * 3000 in prompt
        assert "x" * 3001 not in prompt


class TestGenerationPrompts:
    def test_flashcards_topic_or_content(self):
        assert 'about "Thermodynamics"' in flashcard_prompt("", "Thermodynamics", 10)
        prompt = flashcard_prompt("y" * 6000, "", 15)
        assert "Generate 15 educational flashcards from the following content" in prompt
        assert "y" * 4001 not in prompt

    def test_podcast_syllabus_defaults(self):
        prompt = podcast_prompt("syllabus", None, "")
        assert "Topic: General Science" in prompt
        assert "Subject: Science" in prompt
        assert "Level: intermediate" in prompt

    def test_podcast_document_mode(self):
        prompt = podcast_prompt("document", {"topic": "ignored"}, "d" * 12000)
        assert "Based on this document:" in prompt
        assert "d" * 10001 not in prompt
        assert "ignored" not in prompt

    def test_short_podcast(self):
        assert short_podcast_prompt("Gravity") == (
            "Create a podcast script JSON between Alex and Sam. Topic: Gravity. "
            "Exchanges: 12. Rules: Output ONLY JSON."
        )

    def test_timetable_defaults(self):
        prompt = timetable_prompt("", None, "")
        assert "Exam date: 2 weeks from now" in prompt
        assert "Weak topics: General revision" in prompt
        assert "Peak energy time: morning" in prompt

    def test_timetable_topic_list(self):
        assert "Weak topics: Algebra, Optics" in timetable_prompt("June 1", ["Algebra", "Optics"], "night")

    def test_document_and_youtube_truncation(self):
        assert "c" * 15001 not in document_analysis_prompt("c" * 20000)
        assert "t" * 6001 not in youtube_analysis_prompt("t" * 9000)


class TestCollegePrompts:
    def test_modes(self):
        assert set(COLLEGE_PROMPTS) == {"career", "colleges", "profile", "chat"}

    def test_career_defaults(self):
        prompt = COLLEGE_PROMPTS["career"]({})
        assert "Interests: Not specified" in prompt
        assert "Preferred Field: Any" in prompt

    def test_profile_lists(self):
        prompt = COLLEGE_PROMPTS["profile"]({"extracurriculars": ["Debate", "Robotics"], "testScores": [{"SAT": 1500}]})
        assert "Extracurriculars: Debate, Robotics" in prompt
        assert '[{"SAT": 1500}]' in prompt
        assert "Extracurriculars: None listed" in COLLEGE_PROMPTS["profile"]({})

    def test_chat_context_optional(self):
        assert "Previous context" not in COLLEGE_PROMPTS["chat"]({"message": "Hi"})
        assert "Previous context: earlier" in COLLEGE_PROMPTS["chat"]({"message": "Hi", "context": "earlier"})


class TestSamplePaperContent:
    def test_text_images_and_instructions(self):
        images = [f"data:image/png;base64,{i}" for i in range(7)]
        parts = sample_paper_content("Q1. Define force.", images)
        assert parts[0]["type"] == "text"
        assert "Q1. Define force." in parts[0]["text"]
        image_parts = [p for p in parts if p["type"] == "image_url"]
        assert len(image_parts) == 5
        assert image_parts[0]["image_url"]["url"] == images[0]
        assert parts[-1]["text"] == SAMPLE_PAPER_INSTRUCTIONS

    def test_text_only(self):
        parts = sample_paper_content("text", [])
        assert len(parts) == 2


class TestRetrievalPrompts:
    def test_concept_gate(self):
        prompt = concept_gate_prompt("Why is the sky blue?", "k" * 7000)
        assert "STUDENT'S QUESTION: Why is the sky blue?" in prompt
        assert "k" * 6001 not in prompt
        assert '"microQuiz"' in prompt

    def test_rag_quiz(self):
        prompt = rag_quiz_prompt("ctx", "hard", 7)
        assert "- Difficulty: hard" in prompt
        assert "- Questions: 7" in prompt

    def test_remedial(self):
        prompt = remedial_prompt({"score_percentage": 40, "wrong_answers": [{"q": 1}]}, "r" * 6000)
        assert "Score: 40%" in prompt
        assert '[{"q": 1}]' in prompt
        assert "r" * 5001 not in prompt
