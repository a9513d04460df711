"""
insight_service.py — AI insight gateway
Turns habits/goals snapshots into prompts, asks the LLM once, and relays the
plain text. Provider failures never propagate: each operation degrades to a
named static fallback and logs the reason.
"""

import json
import logging
import time
from datetime import date, datetime, time as dt_time, timedelta, timezone
from typing import Optional

from tafa.models.insight import Insight, SmartSuggestion, WeeklyReport
from tafa.services.habit_service import utc_today
from tafa.services.llm_gateway import LLMGateway

logger = logging.getLogger(__name__)

INSIGHTS_MAX_TOKENS = 1000
QUERY_MAX_TOKENS = 300
SUGGESTIONS_MAX_TOKENS = 1500
VOICE_MAX_TOKENS = 200
WEEKLY_REPORT_MAX_TOKENS = 800

PLAIN_TEXT_RULE = (
    "IMPORTANT: Write in plain, clean English text. Do not use any special formatting symbols "
    "like **, #, &, or markdown syntax. Use simple, clear language that reads naturally."
)

QUERY_FALLBACK = "I'm sorry, I'm having trouble processing your query right now. Please try again later."
VOICE_FALLBACK = "Sorry, I couldn't process that command. Please try again."
TTS_MESSAGE = "Text-to-speech request received. Using browser synthesis as fallback."

FALLBACK_INSIGHTS = [
    {
        "id": "1",
        "type": "pattern",
        "title": "Strong Morning Routine Pattern",
        "content": "Your morning exercise habit has a 85% completion rate. Consider adding meditation right "
                   "after exercise to build a stronger morning routine chain.",
        "priority": "medium",
    },
    {
        "id": "2",
        "type": "recommendation",
        "title": "Goal Deadline Optimization",
        "content": 'Your "Learn Spanish" goal is progressing slower than expected. Consider breaking it into '
                   "smaller weekly milestones to maintain momentum.",
        "priority": "high",
    },
    {
        "id": "3",
        "type": "habit",
        "title": "Streak Recovery Strategy",
        "content": "You tend to restart habits successfully after breaks. Your average recovery time is 3 days, "
                   "which is excellent for maintaining long-term consistency.",
        "priority": "low",
    },
]

FALLBACK_WEEKLY_SUMMARY = (
    "This week showed strong consistency in your morning routines with a 78% completion rate across all "
    "habits. Your goal progress increased by an average of 12%, with particularly strong advancement in "
    "your fitness-related objectives."
)
FALLBACK_WEEKLY_ACHIEVEMENTS = [
    "Maintained 7-day streak in morning exercise",
    "Completed 85% of reading sessions",
    "Advanced Spanish learning goal by 15%",
]
FALLBACK_WEEKLY_RECOMMENDATIONS = [
    "Consider adding a wind-down routine to improve sleep consistency",
    "Schedule goal review sessions on Sundays for better weekly planning",
    "Try habit stacking: link meditation with your existing exercise routine",
]

# The model's report is free prose; these lists are not derived from it.
PLACEHOLDER_REPORT_ACHIEVEMENTS = ["Analysis completed successfully"]
PLACEHOLDER_REPORT_RECOMMENDATIONS = ["Continue tracking your progress consistently"]

SMART_SUGGESTION_CATALOG = [
    {
        "id": "1",
        "title": "Morning Energy Boost",
        "description": "Start your day with 10 minutes of stretching and deep breathing to increase energy levels",
        "category": "health",
        "difficulty": "easy",
        "estimatedTime": 10,
        "frequency": "daily",
        "impactScore": 8,
        "aiReasoning": "Based on your goal to improve productivity, morning energy routines show 40% better "
                       "focus throughout the day",
        "relatedGoals": ["Improve productivity", "Better health"],
        "suggestedTime": "morning",
        "tags": ["energy", "morning", "focus"],
    },
    {
        "id": "2",
        "title": "Learning Sprint",
        "description": "Dedicate 25 minutes to focused learning with 5-minute breaks",
        "category": "learning",
        "difficulty": "medium",
        "estimatedTime": 25,
        "frequency": "daily",
        "impactScore": 9,
        "aiReasoning": "Your learning goals align with this Pomodoro-style approach, proven to improve "
                       "retention by 60%",
        "relatedGoals": ["Learn new skills", "Career growth"],
        "suggestedTime": "afternoon",
        "tags": ["learning", "focus", "pomodoro"],
    },
    {
        "id": "3",
        "title": "Gratitude Reflection",
        "description": "Write down 3 things you're grateful for each evening",
        "category": "mindfulness",
        "difficulty": "easy",
        "estimatedTime": 5,
        "frequency": "daily",
        "impactScore": 7,
        "aiReasoning": "Mindfulness practices correlate with 30% better habit consistency and reduced stress levels",
        "relatedGoals": ["Mental wellness", "Better habits"],
        "suggestedTime": "evening",
        "tags": ["gratitude", "mindfulness", "reflection"],
    },
    {
        "id": "4",
        "title": "Social Connection",
        "description": "Reach out to one friend or family member each day",
        "category": "social",
        "difficulty": "easy",
        "estimatedTime": 15,
        "frequency": "daily",
        "impactScore": 6,
        "aiReasoning": "Social connections improve motivation and accountability for habit formation",
        "relatedGoals": ["Better relationships", "Social wellness"],
        "suggestedTime": "anytime",
        "tags": ["social", "connection", "relationships"],
    },
    {
        "id": "5",
        "title": "Digital Detox Hour",
        "description": "Spend one hour without checking social media or emails",
        "category": "productivity",
        "difficulty": "medium",
        "estimatedTime": 60,
        "frequency": "daily",
        "impactScore": 8,
        "aiReasoning": "Reducing digital distractions can improve focus and productivity by up to 50%",
        "relatedGoals": ["Improve productivity", "Better focus"],
        "suggestedTime": "afternoon",
        "tags": ["focus", "digital-detox", "productivity"],
    },
]

VOICE_COMMANDS = [
    {"id": "nav-overview", "phrase": "go to overview", "category": "navigation", "action": "navigate:overview"},
    {"id": "nav-habits", "phrase": "go to habits", "category": "navigation", "action": "navigate:habits"},
    {"id": "nav-goals", "phrase": "go to goals", "category": "navigation", "action": "navigate:goals"},
    {"id": "nav-suggestions", "phrase": "go to suggestions", "category": "navigation",
     "action": "navigate:suggestions"},
    {"id": "nav-gamification", "phrase": "go to gamification", "category": "navigation",
     "action": "navigate:gamification"},
    {"id": "nav-insights", "phrase": "go to ai insights", "category": "navigation", "action": "navigate:insights"},
    {"id": "add-habit", "phrase": "add new habit", "category": "actions", "action": "add_habit"},
    {"id": "mark-complete", "phrase": "mark habit complete", "category": "actions", "action": "mark_habit_complete"},
    {"id": "add-goal", "phrase": "add new goal", "category": "actions", "action": "add_goal"},
    {"id": "progress-query", "phrase": "what's my progress", "category": "queries", "action": "query_progress"},
    {"id": "streak-query", "phrase": "show my streaks", "category": "queries", "action": "query_streaks"},
    {"id": "insights-query", "phrase": "give me insights", "category": "queries", "action": "query_insights"},
    {"id": "help", "phrase": "help", "category": "system", "action": "help"},
    {"id": "stop-listening", "phrase": "stop listening", "category": "system", "action": "stop_listening"},
]

_NAVIGATION_LABELS = {
    "overview": "overview",
    "habits": "habits",
    "goals": "goals",
    "suggestions": "suggestions",
    "gamification": "gamification",
    "insights": "AI insights",
}

_STATIC_VOICE_REPLIES = {
    "add_habit": "I'll help you add a new habit. Please specify the habit name and details.",
    "mark_habit_complete": "I'll help you mark a habit as complete. Please specify which habit.",
    "add_goal": "I'll help you add a new goal. Please specify the goal name and details.",
    "query_insights": "I'll analyze your data and provide insights. Let me check your progress patterns.",
    "help": "Available commands: Go to overview, habits, goals, suggestions, gamification, or AI insights. "
            "You can also ask about your progress, streaks, or request insights.",
    "stop_listening": "Stopping voice recognition",
}


def _ms_id() -> str:
    return str(int(time.time() * 1000))


def _as_int(value) -> int:
    try:
        return int(value or 0)
    except (TypeError, ValueError):
        return 0


def _dump(data) -> str:
    return json.dumps(data, indent=2, default=str)


def week_bounds(today: Optional[date] = None) -> tuple[datetime, datetime]:
    """Sunday-to-Saturday week containing *today*, as UTC midnights."""
    d = today or utc_today()
    start = d - timedelta(days=(d.weekday() + 1) % 7)
    end = start + timedelta(days=6)
    return (
        datetime.combine(start, dt_time.min, tzinfo=timezone.utc),
        datetime.combine(end, dt_time.min, tzinfo=timezone.utc),
    )


def match_voice_command(command: str) -> Optional[dict]:
    lower = (command or "").lower()
    for cmd in VOICE_COMMANDS:
        if cmd["phrase"] in lower:
            return cmd
    return None


def filter_suggestions(category: Optional[str] = None, difficulty: Optional[str] = None) -> list[SmartSuggestion]:
    suggestions = [SmartSuggestion.model_validate(s) for s in SMART_SUGGESTION_CATALOG]
    if category and category != "all":
        suggestions = [s for s in suggestions if s.category == category]
    if difficulty and difficulty != "all":
        suggestions = [s for s in suggestions if s.difficulty == difficulty]
    return suggestions


# ── Prompts ───────────────────────────────────────────────────────
def build_insights_prompt(habits: list, goals: list) -> str:
    return f"""
You are a personal analytics AI assistant helping users understand their habits and goals data.

Analyze the following personal analytics data and provide 3-5 actionable insights in plain English:

HABITS DATA:
{_dump(habits)}

GOALS DATA:
{_dump(goals)}

Please provide insights in clean, readable English text. For each insight, include:
1. A clear title describing the main point
2. A detailed explanation of what you found
3. Specific, actionable advice based on the data
4. The priority level (low, medium, or high)

Focus on:
- Habit completion patterns and streak analysis
- Goal progress optimization opportunities
- Behavioral patterns and correlations
- Specific, actionable recommendations
- Areas for improvement with concrete steps

Make insights personal, specific, and actionable based on the actual data provided. Write in a conversational, encouraging tone.

{PLAIN_TEXT_RULE}
"""


def build_weekly_report_prompt(habits: list, goals: list, week_start: datetime, week_end: datetime) -> str:
    return f"""
You are a personal analytics AI assistant helping users understand their weekly progress.

Generate a comprehensive weekly report based on the following personal analytics data:

HABITS DATA:
{_dump(habits)}

GOALS DATA:
{_dump(goals)}

WEEK PERIOD: {week_start.strftime('%a %b %d %Y')} to {week_end.strftime('%a %b %d %Y')}

Please provide a weekly report in clean, readable English text. Structure your response with clear sections:

Weekly Summary:
Provide a 2-3 sentence overview of the week's performance and key trends.

Key Achievements:
List 3-5 specific achievements and milestones reached this week.

Recommendations:
Provide 3-5 actionable recommendations for improvement and optimization.

Make the report encouraging, specific, and data-driven based on actual performance. Write in a conversational, supportive tone.

{PLAIN_TEXT_RULE}
"""


def build_query_prompt(query: str, habits: list, goals: list, history: list[dict]) -> str:
    context = ""
    if history:
        context = "\n\nCONVERSATION HISTORY:\n" + "\n".join(
            f"{'User' if turn.get('type') == 'user' else 'AI'}: {turn.get('content', '')}" for turn in history
        )
    return f"""
You are a personal analytics AI assistant helping users understand their habits and goals data through natural conversation.

USER'S CURRENT QUESTION: "{query}"

CURRENT HABITS DATA:
{_dump(habits)}

CURRENT GOALS DATA:
{_dump(goals)}{context}

Please provide a helpful, personalized response based on the user's actual data and conversation context. Be specific, actionable, and encouraging.

Keep your response conversational and natural (2-4 sentences). If this is a follow-up question, reference the conversation history to provide contextually relevant responses.

{PLAIN_TEXT_RULE}
"""


def build_suggestions_prompt(habits: list, goals: list) -> str:
    return f"""
You are an AI personal development coach helping users create optimal habits based on their current data.

CURRENT HABITS DATA:
{_dump(habits)}

CURRENT GOALS DATA:
{_dump(goals)}

Analyze the user's current habits and goals to suggest 5-7 new habits that would be most beneficial. Consider goal alignment, gaps in habit categories, a mix of easy, medium and hard habits, and high-impact habits with proven benefits.

For each suggestion, provide a title, a description, category (productivity, health, learning, mindfulness, social, custom), difficulty, estimated time in minutes, frequency, an impact score from 1 to 10, your reasoning, related goals, a suggested time of day and tags.

Write in clean, encouraging language. Do not use JSON formatting or special symbols.
"""


def build_voice_prompt(command: str, habits: list, goals: list, current_tab: str) -> str:
    return f"""
You are an AI voice assistant for a personal dashboard app. The user has spoken a voice command and you need to understand and respond appropriately.

USER'S VOICE COMMAND: "{command}"

CURRENT CONTEXT:
- Current tab: {current_tab}
- User's habits: {_dump(habits)}
- User's goals: {_dump(goals)}

AVAILABLE ACTIONS:
1. Navigation: "go to overview", "go to habits", "go to goals", "go to suggestions", "go to gamification", "go to ai insights"
2. Actions: "add new habit", "mark habit complete", "add new goal"
3. Queries: "what's my progress", "show my streaks", "give me insights"
4. System: "help", "stop listening"

If the command is unclear, ask for clarification. Keep responses concise (1-2 sentences), encouraging and conversational.

Write in clean, encouraging language. Do not use JSON formatting or special symbols.
"""


class InsightGateway:
    def __init__(self, llm: LLMGateway):
        self.llm = llm

    async def generate_insights(self, habits: list, goals: list) -> dict:
        result = await self.llm.generate(build_insights_prompt(habits, goals), max_tokens=INSIGHTS_MAX_TOKENS)
        if not result.ok:
            logger.error(f"Error generating insights: {result.error}")
            insights = [Insight.model_validate(i) for i in FALLBACK_INSIGHTS]
            return {"insights": [i.to_json() for i in insights], "fallback": True}

        insight = Insight(
            id=_ms_id(),
            type="recommendation",
            title="AI Analysis Complete",
            content=result.text,
            priority="medium",
        )
        return {"insights": [insight.to_json()], "fallback": False}

    async def weekly_report(self, habits: list, goals: list, today: Optional[date] = None) -> dict:
        week_start, week_end = week_bounds(today)
        result = await self.llm.generate(
            build_weekly_report_prompt(habits, goals, week_start, week_end),
            max_tokens=WEEKLY_REPORT_MAX_TOKENS,
        )
        if result.ok:
            summary = result.text
            achievements = PLACEHOLDER_REPORT_ACHIEVEMENTS
            recommendations = PLACEHOLDER_REPORT_RECOMMENDATIONS
        else:
            logger.error(f"Error generating weekly report: {result.error}")
            summary = FALLBACK_WEEKLY_SUMMARY
            achievements = FALLBACK_WEEKLY_ACHIEVEMENTS
            recommendations = FALLBACK_WEEKLY_RECOMMENDATIONS

        report = WeeklyReport(
            id=_ms_id(),
            week_start=week_start.isoformat(),
            week_end=week_end.isoformat(),
            summary=summary,
            achievements=list(achievements),
            recommendations=list(recommendations),
        )
        return {
            "report": report.to_json(),
            "fallback": not result.ok,
            # lists are placeholders whenever the summary came from the model
            "placeholderLists": result.ok,
        }

    async def query(self, query: str, habits: list, goals: list, history: Optional[list[dict]] = None) -> dict:
        result = await self.llm.generate(
            build_query_prompt(query, habits, goals, history or []),
            max_tokens=QUERY_MAX_TOKENS,
        )
        if not result.ok:
            logger.error(f"Error processing query: {result.error}")
            return {"response": QUERY_FALLBACK, "fallback": True}
        return {"response": result.text, "fallback": False}

    async def smart_suggestions(
        self,
        habits: list,
        goals: list,
        category: Optional[str] = None,
        difficulty: Optional[str] = None,
    ) -> dict:
        """The model's narrative is relayed, the structured list is always the static catalog."""
        result = await self.llm.generate(build_suggestions_prompt(habits, goals), max_tokens=SUGGESTIONS_MAX_TOKENS)
        if not result.ok:
            logger.error(f"Error generating smart suggestions: {result.error}")
        suggestions = filter_suggestions(category, difficulty)
        return {
            "suggestions": [s.to_json() for s in suggestions],
            "narrative": result.text if result.ok else None,
        }

    async def voice_command(self, command: str, habits: list, goals: list, current_tab: str = "overview") -> dict:
        matched = match_voice_command(command)
        if matched is not None:
            return {
                "response": self.local_voice_reply(matched["action"], habits, goals),
                "action": matched["action"],
                "source": "local",
            }

        result = await self.llm.generate(
            build_voice_prompt(command, habits, goals, current_tab),
            max_tokens=VOICE_MAX_TOKENS,
        )
        if not result.ok:
            logger.error(f"Error processing voice command: {result.error}")
            return {"response": VOICE_FALLBACK, "action": None, "source": "fallback"}
        return {"response": result.text, "action": None, "source": "model"}

    @staticmethod
    def local_voice_reply(action: str, habits: list, goals: list) -> str:
        if action.startswith("navigate:"):
            tab = action.split(":", 1)[1]
            return f"Navigating to {_NAVIGATION_LABELS.get(tab, tab)}"
        if action == "query_progress":
            done_habits = sum(1 for h in habits if h.get("completed"))
            done_goals = sum(1 for g in goals if g.get("status") == "completed")
            return (
                f"Your progress: {done_habits} out of {len(habits)} habits completed today, "
                f"and {done_goals} out of {len(goals)} goals completed."
            )
        if action == "query_streaks":
            longest = max((_as_int(h.get("streak")) for h in habits), default=0)
            return f"Your longest current streak is {longest} days. Keep up the great work!"
        return _STATIC_VOICE_REPLIES.get(action, "Command executed successfully")

    @staticmethod
    def text_to_speech(text: str) -> dict:
        # No synthesis backend; clients speak the text locally
        return {"success": True, "message": TTS_MESSAGE, "text": text}