"""Faculty AI adoption survey: six structured sections with adaptive follow-ups.

The current section is picked from the message count alone; the thresholds
below mirror how many exchanges each section usually takes.
"""

from chatsurvey.domain.coverage import Topic
from chatsurvey.surveys.base import Phase, SurveyDefinition


def _section(title: str, presentation: str, questions: list[str]) -> str:
    numbered = "\n".join(f"{i}. {q}" for i, q in enumerate(questions, start=1))
    return f"SECTION: {title}\nPRESENTATION: {presentation}\n\nQUESTIONS TO ASK (one at a time):\n{numbered}"


SECTIONS: tuple[Phase, ...] = (
    Phase("ai_awareness", 0, _section(
        "AI Awareness & Current Usage",
        "Warm, quick; these are easy factual questions.",
        [
            "How often do you currently use AI tools? Options: Never, Rarely, Monthly, Weekly, Daily",
            "Which AI tools have you tried, if any?",
            "Have you used AI in any of your courses so far?",
        ],
    )),
    Phase("teaching_interest", 4, _section(
        "Interest in AI for Teaching",
        "Ratings 1-5; follow up briefly on 4-5 ratings.",
        [
            "On a scale of 1-5, rate your interest in using AI for course design.",
            "Rate your interest in using AI for feedback and grading support (1-5).",
            "Rate your interest in personalized learning supported by AI (1-5).",
        ],
    )),
    Phase("concerns", 8, _section(
        "Concerns & Barriers",
        "True or False statements; watch for 'it depends'.",
        [
            "True or False: I'm worried about students using AI to avoid learning.",
            "True or False: Data privacy concerns keep me from trying AI tools.",
            "True or False: I don't have time to learn new tools this year.",
        ],
    )),
    Phase("support_needs", 12, _section(
        "Support Needs",
        "Ask them to rank or name priorities.",
        [
            "What would help you most: workshops, one-on-one consultations, example assignments, or policy guidance?",
            "What support priorities would you rank highest for your department?",
        ],
    )),
    Phase("nexted_services", 15, _section(
        "NextEd Services",
        "Briefly describe each service before asking.",
        [
            "Would you use the DGX Workstation for research or teaching?",
            "Would you be interested in joining the AI Policy Board?",
            "Would you consider the Adoption Clinic to redesign one of your courses?",
        ],
    )),
    Phase("background", 19, _section(
        "Background Information",
        "Final section; keep it quick.",
        [
            "Which department are you in?",
            "How many years have you been teaching?",
            "Overall, what is your comfort level with technology (1-5)?",
        ],
    )),
)

TOPICS: tuple[Topic, ...] = (
    Topic("ai_awareness", "AI Awareness & Current Usage", ("how often", "ai tools", "tried")),
    Topic("teaching_interest", "Interest in AI for Teaching",
          ("interest in using ai", "rate your interest", "personalized learning")),
    Topic("concerns", "Concerns & Barriers", ("true or false", "worried about", "barriers")),
    Topic("support_needs", "Support Needs", ("what would help", "priorities", "rank")),
    Topic("nexted_services", "NextEd Services", ("dgx", "workstation", "policy board", "adoption clinic")),
    Topic("background", "Background Information", ("department", "how many years", "comfort level")),
)

GREETING = """Hi {name}! Welcome to the faculty AI adoption survey.

This is a hybrid survey: some quick structured questions (ratings, True/False) with a bit of conversation when your answers are more nuanced. It has 6 short sections and usually takes 10-30 minutes, depending on how much you want to share.

Let's begin with Section 1, AI Awareness & Current Usage.

How often do you currently use AI tools?

Options: Never, Rarely, Monthly, Weekly, Daily"""

BASE_PROMPT = """You are conducting a hybrid AI adoption survey for St. Cloud State University faculty.

SURVEY STRUCTURE:
Structured questions (ratings, True/False) with adaptive follow-up conversation when responses indicate complexity or high interest. Six sections:
1. AI Awareness & Current Usage
2. Interest in AI for Teaching
3. Concerns & Barriers
4. Support Needs
5. NextEd Services
6. Background Information

ONE QUESTION AT A TIME:
- Present only ONE question per message and wait for the response
- NEVER list multiple questions like "1. Question A, 2. Question B"

DETECTING COMPLEXITY:
Watch for "it depends", "it's complicated", "yes, but...", "sometimes", or answers longer than the question warrants.
When detected: "You mentioned [topic] is more nuanced. Can you tell me more?" Keep deep dives to 2-3 questions.

DISENGAGEMENT:
If the user says "I don't know", "next question", "skip this" or gives 1-2 word answers, respond "Got it, let's move on." and ask the next question.

SECTION TRANSITIONS:
Use a brief transition: "Thanks! Now let's look at [next section topic]..." Do NOT re-explain the survey.

PACING AND COMPLETION:
- Only generate a summary when all 6 sections are complete or the user explicitly asks to wrap up
- NEVER generate a summary after just 1-2 sections

ENDING:
After all sections, say: "I think I have everything I need. Let me generate a summary of your responses..."
Then generate the structured summary and end with: "Does this accurately capture your responses? Anything to add or clarify?\""""

SUMMARY_INSTRUCTION = """Based on the conversation above, generate a structured summary of this faculty member's responses using these bold section headers:

**AI Usage:** [frequency, tools tried, current course use]

**Teaching Interest:** [ratings given for each area, with the reasons they shared]

**Concerns:** [True/False answers and any nuance behind them]

**Support Needs:** [what would help, their stated priorities]

**NextEd Services:** [DGX Workstation / Policy Board / Adoption Clinic: Yes/No/Maybe with context]

**Background:** [department, years teaching, comfort level]

**Key Insights:** [1-3 things a checkbox survey would have missed]

Use "Not discussed" for anything they did not address."""

ANALYSIS_TEMPLATE = """You are analyzing {count} completed faculty AI adoption surveys that combined structured questions with conversational follow-ups.

DATA PROVIDED:
{sessions}

Produce a report with these parts:

1. QUANTITATIVE FINDINGS (What a Traditional Survey Would Show):
   Usage frequency distribution, average interest ratings per area, True/False concern percentages, support priorities, NextEd service interest. Use tables.

2. QUALITATIVE INSIGHTS (What Conversations Revealed):
   WHY they're interested, the real concerns behind "it depends" answers, unexpected findings, department/discipline patterns, early adopter candidates.

3. COMPARATIVE VALUE:
   Side-by-side "Traditional Survey Would Show" vs. "Conversational Survey Revealed".

4. ACTIONABLE RECOMMENDATIONS:
   Which NextEd service to prioritize, profile of the first Adoption Clinic cohort, departments to target first, the policy questions that matter most.

FORMAT: Professional analysis report with clear headers, specific numbers, and representative quotes.

Generate the complete analysis now:"""

FACULTY = SurveyDefinition(
    key="faculty",
    title="Faculty AI Adoption Survey",
    description="Six-section survey about AI use, interest, concerns and support needs",
    estimated_duration="10-30 minutes",
    greeting_template=GREETING,
    base_prompt=BASE_PROMPT,
    summary_instruction=SUMMARY_INSTRUCTION,
    analysis_template=ANALYSIS_TEMPLATE,
    confirmation_question="Does this accurately capture your responses? Anything to add or clarify?",
    phases=SECTIONS,
    topics=TOPICS,
)
