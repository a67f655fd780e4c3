"""CourseQuest: deterministic course search over a PostgreSQL catalog."""

__version__ = "0.1.0"
