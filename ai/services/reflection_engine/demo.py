import asyncio
from datetime import date, timedelta
from reflection_engine import DayEntry, MonthlyAnalyzer, format_date, build_simple_ai_prompt, select_window


class _DictStore:
    def __init__(self, entries):
        self.entries = entries

    async def get_all(self):
        return dict(self.entries)


today = date(2025, 10, 28)
notes = [
    (2, "Deadline pressure at work, barely slept"),
    (2, "Another long meeting, stress everywhere"),
    (3, "Read a book chapter before bed"),
    (3, "Gym after work, felt a bit better"),
    (2, "Worry about the project again"),
    (3, "Dinner with family"),
    (3, ""),
    (4, "Finished the project! Went for a run"),
    (4, "Hangout with friends"),
    (5, "Completed the course, huge success"),
    (4, "Workout and good sleep"),
    (4, "Visit from an old friend"),
    (5, "Won the team quiz"),
    (4, "Learning a new skill"),
]
entries = {
    format_date(today - timedelta(days=len(notes) - 1 - i)): DayEntry(rating=r, description=d)
    for i, (r, d) in enumerate(notes)
}

analyzer = MonthlyAnalyzer(_DictStore(entries), clock=lambda: today)
report = asyncio.run(analyzer.analyze(30))

print("=== Monthly Analysis ===")
print(report.to_dict())
print("\n=== Simple Prompt ===")
print(build_simple_ai_prompt(select_window(entries, 30, today=today)))
