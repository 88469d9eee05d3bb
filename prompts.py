"""
Prompt templates for every study feature.

Each builder returns the full prompt string. Inputs are truncated here so
route handlers never have to think about context limits.
"""

from __future__ import annotations

import json
from typing import Any


def _listing(value: Any) -> str:
    """Comma list from a JSON array; strings pass through."""
    if isinstance(value, (list, tuple)):
        return ", ".join(str(v) for v in value)
    return str(value or "")


TUTOR_SYSTEM_PROMPT = """You are AUREM, an elite AI study companion for students in grades 9-12 and competitive exams (JEE, NEET, SAT, ACT).

CORE PHILOSOPHY — CONCEPTUAL GATING:
- NEVER give direct answers to academic questions
- Instead, guide students to UNDERSTAND concepts through leading questions
- Use the Socratic method: ask "What do you think happens when...?"
- Break complex topics into smaller, digestible steps
- Validate understanding before moving to the next concept
- If a student asks for a direct answer, guide them through the reasoning process

RESPONSE FORMAT:
- Use clear, structured explanations with headings
- Include relevant examples and analogies
- When mathematical, show step-by-step reasoning
- Cite specific concepts and theorems by name
- Use bullet points for clarity
- Keep language approachable but academically rigorous

BOUNDARIES:
- Stay within academic topics relevant to grades 9-12 and competitive exams
- If asked about non-academic topics, politely redirect to studies
- Do not write entire essays or assignments for students
- Encourage critical thinking and independent problem-solving"""


def with_document_context(question: str, document_context: str, limit: int = 8000) -> str:
    return f"[DOCUMENT CONTEXT]\n{document_context[:limit]}\n\n[STUDENT QUESTION]\n{question}"


# ── Quiz ─────────────────────────────────────────────────────

QUESTION_TYPES = {
    "mcq": "Multiple Choice Questions with 4 options each",
    "theory": "Short answer/theory questions requiring 2-3 sentence answers",
    "true-false": "True or False statements",
    "mixed": "A mix of MCQ, True/False, and short answer questions",
}

EXAM_PATTERNS = {
    "JEE": "Follow JEE Main/Advanced pattern with numerical and conceptual questions. Include calculation-heavy problems.",
    "NEET": "Follow NEET pattern with biology-heavy MCQs. Focus on NCERT concepts and application.",
    "SAT": "Follow SAT pattern with reading comprehension and data analysis.",
    "ACT": "Follow ACT pattern with time-pressured reasoning questions.",
    "CBSE": "Follow CBSE board exam pattern with NCERT-aligned questions.",
    "ICSE": "Follow ICSE pattern with application-based questions.",
}


def quiz_prompt(req: dict[str, Any]) -> str:
    subject = req.get("subject", "")
    board = req.get("board") or ""
    chapters = req.get("chapters") or []
    weak_topics = req.get("weakTopics") or []
    difficulty = req.get("difficulty") or "medium"
    content = req.get("content") or ""

    weak_context = ""
    if weak_topics:
        weak_context = (
            f"\n\nIMPORTANT: The student is weak in these specific topics: {_listing(weak_topics)}.\n"
            "Include 40% of questions specifically targeting these weak areas to help them improve.\n"
            "Make questions on weak topics slightly easier to build confidence, then gradually harder."
        )
    exam_pattern = f"\nExam Pattern: {EXAM_PATTERNS[board]}" if board in EXAM_PATTERNS else ""
    difficulty_line = (
        "Start easy, gradually increase difficulty" if difficulty == "adaptive" else difficulty
    )

    lines = [
        "You are an expert education assessment designer. Generate a quiz with these specifications:",
        "",
        f"Subject: {subject}",
    ]
    if chapters:
        lines.append(f"Chapters/Topics: {_listing(chapters)}")
    if board:
        lines.append(f"Board/Exam: {board}")
    if req.get("classLevel"):
        lines.append(f"Class: {req['classLevel']}")
    lines += [
        f"Number of Questions: {req.get('questionCount')}",
        f"Difficulty: {difficulty_line}",
        f"Question Type: {QUESTION_TYPES.get(req.get('questionType'), 'Multiple Choice Questions')}",
        exam_pattern,
        weak_context,
    ]
    if content:
        lines.append(f"\nReference Content:\n{content[:3000]}")

    return "\n".join(lines) + f"""

RESPOND WITH ONLY A VALID JSON ARRAY of questions. Each question object must have:
{{
  "id": "q1",
  "type": "mcq" | "theory" | "true-false",
  "question": "the question text",
  "options": ["A) ...", "B) ...", "C) ...", "D) ..."],  // only for mcq
  "correctAnswer": "the correct answer",
  "explanation": "detailed explanation of why this is correct, referencing the concept",
  "difficulty": "easy" | "medium" | "hard",
  "topic": "specific topic name",
  "chapter": "chapter name",
  "subject": "{subject}",
  "marks": 1
}}

Rules:
- Questions must be conceptually challenging, not just memorization
- Explanations must teach the concept, not just state the answer
- For MCQs, distractors must be plausible and test common misconceptions
- For theory questions, omit the "options" field
- For true-false, set options to ["True", "False"]
- Vary the difficulty according to the specified level
- Each question must have a clear, specific "topic" tag for weakness tracking

Return ONLY the JSON array, no markdown, no explanation."""


# ── Flashcards ───────────────────────────────────────────────

def flashcard_prompt(content: str, topic: str, count: int) -> str:
    subject_line = f'about "{topic}"' if topic else "from the following content"
    content_block = f"CONTENT:\n{content[:4000]}" if content else ""
    return f"""Generate {count} educational flashcards {subject_line}.

{content_block}

Return a JSON array of flashcards:
[
  {{
    "front": "Clear, specific question or concept prompt",
    "back": "Comprehensive answer with key details and examples",
    "topic": "specific topic name",
    "difficulty": "easy" | "medium" | "hard"
  }},
  ...
]

Rules:
- Front side should be a clear question or "Define/Explain/What is..." prompt
- Back side should teach the concept thoroughly but concisely
- Mix difficulties: ~30% easy, ~50% medium, ~20% hard
- Cover the most important concepts first
- Each card should be self-contained

Return ONLY the JSON array, no markdown."""


# ── Podcast ──────────────────────────────────────────────────

def podcast_prompt(mode: str, syllabus: dict | None, document_content: str) -> str:
    syllabus = syllabus or {}
    if mode == "document" and document_content:
        context = f"Based on this document:\n{document_content[:10000]}"
    else:
        context = (
            f"Topic: {syllabus.get('topic') or 'General Science'}\n"
            f"Subject: {syllabus.get('subject') or 'Science'}\n"
            f"Level: {syllabus.get('level') or 'intermediate'}"
        )
    return f"""Generate a natural, engaging podcast script between two hosts (Alex and Sam) discussing this educational topic.

{context}

Return ONLY valid JSON in this exact format:
{{
  "script": [
    {{"speaker": "Alex", "text": "Welcome back to The Deep Dive! Today we're..."}},
    {{"speaker": "Sam", "text": "Yeah, this one is really fascinating..."}},
    ...
  ]
}}

REQUIREMENTS:
- Make it EXTREMELY natural and conversational — like a real podcast
- Include natural speech patterns: "um", "you know", "honestly", "actually", "right?"
- Alex is the enthusiastic host who asks great questions
- Sam is the knowledgeable expert who explains with analogies
- Include moments of genuine surprise, humor, and "aha" moments
- Cover the topic thoroughly but keep it engaging
- Generate at least 15-20 lines of dialogue
- Include interruptions, agreements ("Exactly!", "Oh yeah"), and reactions
- End with a brief recap and call to action for studying
- Return ONLY valid JSON, no markdown or extra text"""


def short_podcast_prompt(topic: str, exchanges: int = 12) -> str:
    return (
        f"Create a podcast script JSON between Alex and Sam. Topic: {topic}. "
        f"Exchanges: {exchanges}. Rules: Output ONLY JSON."
    )


# ── Timetable ────────────────────────────────────────────────

def timetable_prompt(exam_date: str, weak_topics: Any, energy_level: str) -> str:
    weak_topics = _listing(weak_topics)
    return f"""Create a 7-day study timetable for a student with these details:
- Exam date: {exam_date or "2 weeks from now"}
- Weak topics: {weak_topics or "General revision"}
- Peak energy time: {energy_level or "morning"}

Return ONLY valid JSON in this exact format:
{{
  "timetable": [
    {{
      "id": "monday-1",
      "day": "Monday",
      "timeSlot": "9:00 - 10:30",
      "subject": "Mathematics",
      "topic": "Quadratic Equations",
      "duration": 90,
      "priority": "high",
      "completed": false
    }}
  ]
}}

REQUIREMENTS:
- Create 3-5 entries per day for each day of the week (Monday-Sunday)
- Schedule harder/weak topics during peak energy time
- Include breaks implicitly (between slots)
- Priority should be "high" for weak topics, "medium" for moderate, "low" for revision
- Mix subjects throughout the day to avoid fatigue
- Include at least one revision slot per day
- Return ONLY valid JSON, no markdown or extra text"""


# ── Documents ────────────────────────────────────────────────

def document_analysis_prompt(content: str) -> str:
    return f"""Analyze the following study document/notes and return a JSON response with this exact structure:
{{
  "summary": "A comprehensive summary of the document in 3-5 paragraphs",
  "keyPoints": ["key point 1", "key point 2", ...at least 5 key points],
  "questions": [
    {{"question": "An exam-worthy question based on the content", "answer": "A clear, concise answer"}},
    ...at least 5 questions
  ]
}}

IMPORTANT: Return ONLY valid JSON. No markdown, no extra text.

DOCUMENT:
{content[:15000]}"""


# ── YouTube ──────────────────────────────────────────────────

def youtube_analysis_prompt(transcript: str) -> str:
    return f"""You are an expert educational content creator. A student has uploaded a YouTube video for study.

VIDEO TRANSCRIPT:
{transcript[:6000]}

Generate a comprehensive study analysis in this EXACT JSON format:
{{
  "summary": "A clear, concise 3-4 paragraph summary of the video content, focusing on key educational concepts",
  "notes": ["Key point 1 with detail", "Key point 2 with detail", ...],
  "flashcards": [
    {{"front": "Question or concept", "back": "Detailed answer or explanation", "difficulty": "easy|medium|hard"}},
    ...
  ],
  "questions": [
    {{
      "id": "q1",
      "type": "mcq",
      "question": "Conceptual question about the video content",
      "options": ["A) ...", "B) ...", "C) ...", "D) ..."],
      "correctAnswer": "The correct option text",
      "explanation": "Why this is correct",
      "difficulty": "easy|medium|hard",
      "topic": "specific topic"
    }},
    ...
  ]
}}

Generate:
- 8-12 key notes
- 10-15 flashcards with varied difficulty
- 5-8 conceptual quiz questions
- Focus on understanding, not memorization

Return ONLY valid JSON, no markdown wrapping."""


# ── College & careers ────────────────────────────────────────

def career_prompt(params: dict) -> str:
    return f"""You are an expert career counselor for students. Based on the following interests and strengths, recommend 5 ideal career paths.

Interests: {params.get("interests") or "Not specified"}
Strengths: {params.get("strengths") or "Not specified"}
Preferred Field: {params.get("field") or "Any"}

Return JSON:
{{
  "careers": [
    {{
      "title": "Career Title",
      "description": "2-3 sentence description",
      "avgSalary": "$XX,XXX - $XX,XXX",
      "growthOutlook": "High/Medium/Low",
      "requiredEducation": "What degree/certification needed",
      "skills": ["skill1", "skill2", "skill3"],
      "topColleges": ["College 1", "College 2", "College 3"],
      "matchScore": 85
    }}
  ]
}}
Return ONLY valid JSON."""


def college_search_prompt(params: dict) -> str:
    return f"""You are a college admissions expert. Find the best matching colleges based on these criteria:

Country: {params.get("country") or "Any"}
Major: {params.get("major") or "Any"}
Budget: {params.get("budget") or "Any"}
Preferred Ranking: {params.get("ranking") or "Any"}
Test Scores: {params.get("scores") or "Not provided"}

Return JSON with 8-10 colleges:
{{
  "colleges": [
    {{
      "name": "University Name",
      "location": "City, Country",
      "matchPercentage": 85,
      "ranking": "#X in Country",
      "acceptanceRate": "XX%",
      "tuition": "$XX,XXX/year",
      "strengths": ["strength1", "strength2"],
      "scholarshipInfo": "Available scholarships info"
    }}
  ]
}}
Return ONLY valid JSON."""


def profile_match_prompt(params: dict) -> str:
    extracurriculars = _listing(params.get("extracurriculars")) or "None listed"
    return f"""You are an expert college admissions analyst. Analyze this student profile and match them to colleges:

GPA: {params.get("gpa") or "Not provided"}
Test Scores: {json.dumps(params.get("testScores") or [])}
Target Major: {params.get("major") or "Undecided"}
Extracurriculars: {extracurriculars}
Budget: {params.get("budget") or "Not specified"}
Preferred Location: {params.get("location") or "Anywhere"}
Preferred Country: {params.get("country") or "Any"}

Return JSON:
{{
  "profileStrength": "Strong/Moderate/Developing",
  "overallScore": 78,
  "analysis": "3-4 sentence analysis of the profile",
  "improvements": ["improvement1", "improvement2", "improvement3"],
  "matchedColleges": [
    {{
      "name": "College Name",
      "location": "City, Country",
      "matchPercentage": 90,
      "category": "Reach/Target/Safety",
      "ranking": "#X",
      "acceptanceRate": "XX%",
      "tuition": "$XX,XXX/year",
      "strengths": ["strength1", "strength2"],
      "whyGoodFit": "1-2 sentence explanation"
    }}
  ]
}}
Return ONLY valid JSON."""


def college_chat_prompt(params: dict) -> str:
    context = f"Previous context: {params['context']}" if params.get("context") else ""
    return f"""You are a friendly, expert college admissions counselor chatbot named "AUREM College Guide".
Answer the student's question helpfully and specifically. Be encouraging but realistic.

Student's question: {params.get("message", "")}

{context}

Provide a helpful, detailed but concise response. Format nicely for readability."""


COLLEGE_PROMPTS = {
    "career": career_prompt,
    "colleges": college_search_prompt,
    "profile": profile_match_prompt,
    "chat": college_chat_prompt,
}


# ── Sample paper (vision) ────────────────────────────────────

SAMPLE_PAPER_INSTRUCTIONS = """ROLE: You are an expert academic examiner.
TASK: Create a BRAND NEW question paper based on the sample provided above.

REQUIREMENTS:
1.  **Pattern Match**: Strictly follow the same pattern (sections, question types, marks distribution) as the sample.
2.  **Difficulty Match**: The difficulty level must match the sample.
3.  **Topic/Syllabus**: Cover the same syllabus/topics as implied by the sample questions.
4.  **Length**: Generate exactly the same number of questions (up to 35).
5.  **NO HOLD BACKS**: Generate ALL questions. Do not summarize. Full question paper required.
6.  **Image Integration**: If the sample has image-based questions, generate similar NEW questions.
    - Since you cannot generate actual images, provide a [Visual Description] in square brackets where the image should be.
    - Example: Q5. Find the area of the shaded region. [Image: A circle of radius 5cm with a 90-degree sector removed].

OUTPUT FORMAT:
Return the output in clean Markdown format.
- Use # for Header (School Name/Exam Name inferred or generic)
- Use ## for Sections
- Use **Bold** for marks.

Now, generate the full paper."""


def sample_paper_content(extracted_text: str, images: list[str], max_images: int = 5) -> list[dict]:
    """Multimodal message parts: sample text, up to `max_images` page images, then the instructions."""
    parts: list[dict] = []
    if extracted_text:
        parts.append({"type": "text", "text": f"Here is the text content of a sample paper:\n{extracted_text}\n\n"})
    if images:
        parts.append({
            "type": "text",
            "text": "Here are the visual pages of the sample paper for context (styling, diagrams, etc.):",
        })
        for img in images[:max_images]:
            parts.append({"type": "image_url", "image_url": {"url": img}})
    parts.append({"type": "text", "text": SAMPLE_PAPER_INSTRUCTIONS})
    return parts


# ── Retrieval-grounded prompts ───────────────────────────────

def concept_gate_prompt(query: str, context: str) -> str:
    return f"""You are AUREM, a premium AI study companion. You NEVER give direct full answers. Instead, you follow this protocol:

1. ASSESS: Determine what concept the student is asking about.
2. HINT: Give a targeted hint that points toward the answer without revealing it.
3. MICRO-QUIZ: Ask a simple related question to test if the student grasps the underlying concept.
4. Only if the student demonstrates understanding in follow-up messages, provide the complete explanation.

CONTEXT FROM STUDENT'S NOTES:
{context[:6000]}

STUDENT'S QUESTION: {query}

Respond in this JSON format:
{{
  "conceptArea": "the main concept being tested",
  "hint": "a helpful hint pointing toward the answer",
  "microQuiz": "a simple question to test concept understanding",
  "confidenceScore": 0.0-1.0,
  "citations": ["relevant source references from the context"]
}}"""


def rag_quiz_prompt(context: str, difficulty: str, count: int) -> str:
    return f"""You are an expert exam paper setter. Create a valid, syllabus-aligned assessment.

CONTEXT:
{context[:10000]}

REQUIREMENTS:
- Difficulty: {difficulty}
- Questions: {count}
- Mix of MCQ, True/False, and short answer

OUTPUT: Respond ONLY with valid JSON:
{{
  "quiz_metadata": {{"topic": "string", "difficulty": "{difficulty}"}},
  "questions": [
    {{
      "id": 1,
      "type": "mcq",
      "question": "string",
      "options": ["A", "B", "C", "D"],
      "correct_answer": "Option text",
      "explanation": "string",
      "topic": "string",
      "difficulty": "easy|medium|hard"
    }}
  ]
}}"""


def remedial_prompt(results: dict, context: str) -> str:
    return f"""You are an AI Learning Mentor. Analyze the performance and provide a remedial plan.

DATA:
- Score: {results.get("score_percentage", 0)}%
- Mistakes: {json.dumps(results.get("wrong_answers") or [])}
- Document Context: {context[:5000]}

FORMAT: Return a structured Markdown report with headers (Performance, Gaps, Remedial, Action Plan)."""
