"""Course-redesign exploration: one course, its barriers, and readiness for AI."""

from chatsurvey.domain.coverage import Topic
from chatsurvey.surveys.base import Phase, SurveyDefinition

TOPICS: tuple[Topic, ...] = (
    Topic("course", "The course", ("which course", "course", "students", "enrollment")),
    Topic("current_design", "Current design", ("assignment", "assessment", "format", "currently")),
    Topic("ai_ideas", "Ideas for AI", ("ai could", "idea", "imagine", "try")),
    Topic("concerns", "Concerns", ("concern", "worry", "risk", "integrity")),
    Topic("readiness", "Readiness", ("ready", "readiness", "timeline", "next semester")),
)

GREETING = """Hi {name}! Thanks for exploring a course redesign with us.

We'll talk through one specific course: how it works today, where AI might help or hurt, and what would make you comfortable trying something. There are no right answers, and "I'm not sure yet" is a perfectly good one.

Which course are you thinking about, and who are the students in it?"""

BASE_PROMPT = """You are a thoughtful instructional design partner helping a faculty member explore whether and how AI could fit into ONE specific course they teach.

APPROACH:
- One question at a time; reflect back what you heard before asking the next
- Stay concrete: the actual course, assignments, students and constraints
- Surface concerns honestly; never push adoption
- You are gathering understanding for the Adoption Clinic team, not prescribing a redesign

COVER, IN ROUGHLY THIS ORDER:
1. The course (level, size, format, department)
2. Current design (key assignments and assessments, what works, what doesn't)
3. Ideas for AI (where it could help students or the instructor)
4. Concerns (academic integrity, equity, workload, accuracy, institutional policy)
5. Readiness (cautiously open / ready to pilot / blocked / opposed) and what would change it

ENDING:
When the topics are covered, say "Let me summarize what I heard about your course..." and generate the summary, ending with: "Does this accurately capture your thoughts? Anything to add or clarify?\""""

PHASES: tuple[Phase, ...] = (
    Phase("context", 0, "Establish the course context before anything else. Do not discuss AI ideas yet."),
    Phase(
        "deep_dive",
        6,
        "Go deeper on assignments, AI ideas and concerns. Ask about one concrete assignment at a time.",
    ),
    Phase(
        "wrap_up",
        16,
        "Assess readiness and what support would change it, then move to the summary.",
    ),
)

SUMMARY_INSTRUCTION = """Based on the conversation above, generate a structured summary using these bold section headers:

**Course Overview:** [course name/number, level, size, format, department]

**Current Design:** [key assignments and assessments; what works and what doesn't]

**AI Opportunities:** [specific ideas discussed, tied to assignments]

**Concerns:** [each concern with its context]

**Readiness:** [one of: Ready to pilot / Cautiously open / Blocked / Opposed, with the reason]

**Support Needed:** [what would help them move forward]

Use "Not discussed" for anything they did not address."""

ANALYSIS_TEMPLATE = """You are analyzing {count} completed course-redesign exploration conversations with faculty.

DATA PROVIDED:
{sessions}

Produce a report covering:
1. READINESS DISTRIBUTION: how many are ready to pilot, cautiously open, blocked, opposed; with reasons.
2. COURSE PATTERNS: levels, formats and departments represented; recurring assignment types.
3. AI OPPORTUNITIES: ideas that appear across courses vs. course-specific ideas.
4. CONCERNS: most frequent concerns and the context behind them; which are institutional vs. personal.
5. RECOMMENDATIONS: a first Adoption Clinic cohort (name participants and courses), support to build first, and barriers to remove.

FORMAT: Professional report with clear headers, tables where useful, and representative quotes."""

COURSE_REPORT_TEMPLATE = """You are writing an individual course redesign report for {participant}.

CONFIRMED SUMMARY:
{summary}

PARTICIPANT EDITS:
{user_edits}

FULL CONVERSATION:
{conversation}

Write a practical report for the Adoption Clinic team with these sections:
1. Course Snapshot
2. Redesign Opportunities (ranked, each tied to a specific assignment)
3. Concerns to Address (with a concrete mitigation for each)
4. Suggested Pilot (one small, low-risk experiment for next term)
5. Support Plan (who should follow up, and with what)

Keep it under 800 words and grounded only in what the participant said."""

ADOPTION = SurveyDefinition(
    key="adoption",
    title="Course Redesign Exploration",
    description="Explore where AI might fit (or not) in one of your courses",
    estimated_duration="15-20 minutes",
    greeting_template=GREETING,
    base_prompt=BASE_PROMPT,
    summary_instruction=SUMMARY_INSTRUCTION,
    analysis_template=ANALYSIS_TEMPLATE,
    phases=PHASES,
    topics=TOPICS,
    course_report_template=COURSE_REPORT_TEMPLATE,
)
