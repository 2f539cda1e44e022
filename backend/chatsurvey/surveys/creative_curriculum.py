"""Creative Curriculum Chatbot (C3): creative applications of AI across disciplines.

The only survey type with password-protected resume, stuck detection and
timed check-ins.
"""

from chatsurvey.domain.coverage import Topic
from chatsurvey.surveys.base import Phase, SurveyDefinition

TOPICS: tuple[Topic, ...] = (
    Topic("course_specifics", "Course Details & Context",
          ("course", "class", "students", "level", "department", "enrollment", "format"),
          "Which specific course they're thinking about and its context"),
    Topic("adoption_motivation", "Why AI, Why Now",
          ("why", "prompted", "interested", "motivation", "considering", "exploring"),
          "What prompted them to explore AI for this course"),
    Topic("barriers_challenges", "Barriers & Challenges",
          ("concern", "worry", "barrier", "obstacle", "challenge", "afraid", "problem", "difficult"),
          "Specific concerns about AI adoption: pedagogical, institutional, technical, student-related"),
    Topic("core_values", "Core Learning Goals",
          ("remember forever", "most important", "core learning", "essential", "fundamental", "takeaway"),
          "What they want students to remember forever from this course"),
    Topic("student_agency", "Student Agency & Creativity",
          ("choice", "agency", "creative", "voice", "meaningful decisions", "ownership", "authentic"),
          "Where students currently exercise creativity, choice, or authentic voice"),
    Topic("exceptional_moments", "Exceptional Student Work",
          ("exceptional", "stood out", "beyond", "excellent", "memorable", "impressed"),
          "Examples of when students went beyond the assignment"),
    Topic("ai_possibilities", "AI as Creative Amplifier",
          ("possibilities", "enhance", "amplify", "enable", "make possible", "potential"),
          "Where they see AI potentially amplifying student creativity"),
    Topic("next_steps", "Path Forward",
          ("support", "need", "help", "try", "experiment", "pilot", "resources"),
          "What they'd need to feel safe exploring creative AI applications"),
)

STUCK_SIGNALS: tuple[str, ...] = (
    "i don't know",
    "i dont know",
    "not sure",
    "no idea",
    "stuck",
    "can't think",
    "skip",
    "move on",
)

GREETING = """Hi {name}! Thanks for taking time to explore creative applications of AI in teaching.

I'm here to think alongside you about where AI might fit (or not fit) in your course - not to prescribe solutions, but to help you work through the questions.

A few things to know:

• This conversation usually takes 15-20 minutes
• There are no right or wrong answers - complexity and uncertainty are welcome
• You can pause anytime and pick up where you left off later
• I'll check in every 10 minutes to see how you're doing

Let's start with something concrete: Which specific course are you thinking about redesigning or exploring with AI?"""

_topic_lines = "\n".join(f"- {t.label}: {t.description}" for t in TOPICS)

BASE_PROMPT = f"""You are C3, the Creative Curriculum Chatbot: a thinking partner for faculty exploring creative applications of AI in their teaching, in any discipline.

STANCE:
- Think alongside them; do not prescribe solutions
- One question at a time, grounded in their actual course
- Complexity, uncertainty and skepticism are welcome; "not for my course" is a valid conclusion
- Do not show the topic list to the participant unless they ask

TOPICS TO EXPLORE (roughly in order):
{_topic_lines}

PAUSING:
The participant can pause and come back later with their email and password; if they say they need to stop, reassure them their progress is saved.

ENDING:
When the topics are covered, say "Let me pull together what I heard..." and generate the summary with bold section headers, ending with: "Does this accurately capture your thoughts? Anything to add or clarify?\""""

PHASES: tuple[Phase, ...] = (
    Phase("opening", 0, "Ground the conversation in one specific course and why they are exploring AI now."),
    Phase(
        "exploring",
        6,
        "Explore barriers, core learning goals and where students already exercise creativity and voice.",
    ),
    Phase(
        "synthesizing",
        16,
        "Connect their exceptional-student-work examples to where AI might amplify creativity. "
        "Offer one or two possibilities as questions, not recommendations.",
    ),
    Phase("wrap_up", 24, "Ask what they would need to feel safe experimenting, then move to the summary."),
)

SUMMARY_INSTRUCTION = """Based on the conversation above, write a summary of this participant's exploration with these bold section headers:

**Course Context:** [course, level, students, format]

**Why AI, Why Now:** [what prompted the exploration]

**Barriers & Concerns:** [specific concerns with context]

**Core Learning Goals:** [what students should remember forever]

**Student Creativity & Agency:** [where students already make meaningful choices; exceptional work examples]

**AI Possibilities:** [where AI might amplify creativity, in their words]

**Path Forward:** [what they need to feel safe experimenting]

Use "Not discussed" for anything they did not address."""

ANALYSIS_TEMPLATE = """You are analyzing {count} completed Creative Curriculum Chatbot conversations with faculty across disciplines.

DATA PROVIDED:
{sessions}

Produce a report covering:
1. WHO PARTICIPATED: disciplines, course levels and formats.
2. MOTIVATIONS: why faculty are exploring AI now, grouped by underlying reason.
3. BARRIERS: pedagogical, institutional, technical and student-related; frequency and context.
4. CREATIVITY PATTERNS: where students already exercise agency, and the exceptional-work stories.
5. AI AS AMPLIFIER: possibilities faculty themselves raised, grouped across disciplines.
6. RECOMMENDATIONS: support to build, faculty to invite into pilots (by name), and sequencing.

FORMAT: Professional report with clear headers and representative quotes."""

COURSE_REPORT_TEMPLATE = """You are writing a creative-curriculum report for {participant}.

CONFIRMED SUMMARY:
{summary}

PARTICIPANT EDITS:
{user_edits}

FULL CONVERSATION:
{conversation}

Write a report with these sections:
1. Course & Learning Goals
2. Where Students Already Create
3. Creative AI Possibilities (each tied to a goal above)
4. Concerns & Safeguards
5. A First Experiment

Keep it under 800 words and grounded only in what the participant said."""

CREATIVE_CURRICULUM = SurveyDefinition(
    key="creative-curriculum",
    title="Creative Curriculum Chatbot (C3)",
    description="Exploring creative applications of AI in teaching across all disciplines",
    estimated_duration="15-20 minutes",
    greeting_template=GREETING,
    base_prompt=BASE_PROMPT,
    summary_instruction=SUMMARY_INSTRUCTION,
    analysis_template=ANALYSIS_TEMPLATE,
    phases=PHASES,
    topics=TOPICS,
    stuck_signals=STUCK_SIGNALS,
    course_report_template=COURSE_REPORT_TEMPLATE,
    supports_login=True,
    checkin_enabled=True,
    show_timer=True,
    show_progress=False,
)
