"""Workshop feedback survey: short follow-up interviews after an AI workshop."""

from chatsurvey.domain.coverage import Topic
from chatsurvey.surveys.base import Phase, SurveyDefinition

WORKSHOP_CONTEXT = """The VizLab AI Workshop introduced faculty, staff and business partners to
generative AI in teaching and research: hands-on prompting, a DGX workstation demo,
a panel on AI policy, and an overview of NextEd services (DGX Workstation access,
the AI Policy Board, and the Adoption Clinic for course redesign)."""

WORKSHOP_TOPICS: tuple[Topic, ...] = (
    Topic("impressions", "Overall workshop impressions",
          ("workshop", "impression", "stood out", "resonated")),
    Topic("nexted_interest", "Interest in NextEd services",
          ("dgx", "policy board", "adoption clinic", "nexted")),
    Topic("concerns", "AI concerns and support needs",
          ("concern", "reservation", "privacy", "barrier", "support")),
    Topic("technical_comfort", "Technical comfort with AI tools",
          ("comfortable", "experience with", "tools do you use", "comfort")),
    Topic("course_ideas", "Course ideas",
          ("course", "class", "redesign", "assignment")),
    Topic("survey_experience", "Feedback on this conversational format",
          ("this format", "conversational", "traditional survey", "multiple-choice")),
)

GREETING = """Hi {name}! Thanks for taking a few minutes to share your thoughts on the VizLab AI Workshop.

I'm a prototype conversational feedback tool. Instead of a multiple-choice form, we'll just talk for 5-10 minutes. Any answer is fine, including "I don't know" or "I'd rather not say".

To start: what stood out to you most from the workshop?"""

BASE_PROMPT = f"""You are a conversational feedback tool conducting follow-up interviews with participants from the VizLab AI Workshop at St. Cloud State University.

WORKSHOP CONTEXT:
{WORKSHOP_CONTEXT}

YOUR ROLE:
- You conduct natural, exploratory conversations that are more engaging than traditional surveys
- Conversations are saved for the NextEd team to review
- One question at a time; let participants elaborate as much as they want
- Your role is to understand and explore, NOT to advise, solve, or prescribe

RECOGNIZE DISENGAGEMENT AND MOVE ON:
If the participant says "I don't know", "not sure", "next question", gives a 1-2 word answer
after you already asked once, or deflects: acknowledge briefly ("Fair enough") and move to a
different topic immediately. Only ask follow-ups (max 1-2) when answers are detailed or the
participant raises new ideas unprompted.

CORE TOPICS TO COVER:
{chr(10).join(f"{i}. {t.label}" for i, t in enumerate(WORKSHOP_TOPICS, start=1))}

BOUNDARIES:
- If asked for advice, redirect: you are here to understand their perspective; the NextEd team will use these conversations to shape support.
- If asked how you work, be transparent about being an AI prototype built on Claude.

TIME MANAGEMENT:
- Aim for 5-10 minutes (roughly 8-12 exchanges); breadth over depth.

ENDING THE CONVERSATION:
- When most topics are covered, say: "I think I have a good sense of your perspective. Let me summarize what I heard..."
- Then generate the summary and end it with "Does this accurately capture your thoughts? Anything to add or clarify?"
- Do NOT thank them or end the session; wait for their confirmation."""

PHASES: tuple[Phase, ...] = (
    Phase("explore", 0, ""),
    Phase(
        "wrap_up",
        20,
        "You are past 10 exchanges. Cover any remaining core topic in one question at most, "
        "then move to the summary.",
    ),
)

SUMMARY_INSTRUCTION = """Based on the conversation above, generate a structured summary using this exact format:

PARTICIPANT SUMMARY

Workshop Feedback:
[2-3 sentences capturing their main impressions of the workshop and what resonated or didn't]

NextEd Interest:
- DGX Workstation: [Yes/No/Maybe - include specific use case if mentioned, or "Not discussed"]
- Policy Board: [Yes/No/Maybe - include any specific interests, or "Not discussed"]
- Adoption Clinic: [Yes/No/Maybe - include course ideas if mentioned, or "Not discussed"]

AI Concerns & Support Needs:
[Bullet points covering concerns, barriers, privacy, environmental considerations and helpful support, or "None expressed"]

Technical Comfort Level:
[Brief assessment of their experience with AI tools, or "Not discussed"]

Course Ideas:
[Specific course redesign concepts they mentioned, or "Not discussed"]

Survey Experience:
[Their thoughts on this conversational approach vs. traditional surveys, or "Not discussed"]

Recommended Follow-up:
[1-2 specific next steps based on their interests, or "General NextEd outreach"]

Keep it concise but capture important details. Be honest if the conversation was brief or surface-level."""

ANALYSIS_TEMPLATE = """You are analyzing feedback from a workshop about AI adoption in education. You have {count} completed conversational interviews.

YOUR TASK:
Generate an analysis report for strategic decisions about NextEd program development, showing what conversational interviews reveal beyond a traditional survey.

DATA PROVIDED:
{sessions}

ANALYSIS REQUIREMENTS:

1. QUANTITATIVE FINDINGS: participation, interest in each NextEd offering, top concerns and their frequency, technical comfort levels. Use tables and percentages.

2. QUALITATIVE INSIGHTS: the "why" behind the numbers, concrete use cases, unexpected themes, contradictions, departmental barriers, representative quotes attributed to participants. When several people want the same thing for DIFFERENT reasons, call it out explicitly.

3. COMPARATIVE ANALYSIS: "Traditional Survey Results Would Show" vs. "Conversational Method Revealed". Only make quantitative claims about insight yield if you show the counting method.

4. STRATEGIC RECOMMENDATIONS: cite the supporting insight, differentiate approaches, name specific individuals for specific roles, and sequence actions as Immediate (30 days), Medium-term (3-6 months) and Long-term (6-12 months).

FORMAT: Professional report with clear section headers."""

WORKSHOP = SurveyDefinition(
    key="workshop",
    title="Workshop Feedback",
    description="Follow-up conversation about the VizLab AI Workshop",
    estimated_duration="5-10 minutes",
    greeting_template=GREETING,
    base_prompt=BASE_PROMPT,
    summary_instruction=SUMMARY_INSTRUCTION,
    analysis_template=ANALYSIS_TEMPLATE,
    phases=PHASES,
    topics=WORKSHOP_TOPICS,
    summary_max_tokens=1500,
)
