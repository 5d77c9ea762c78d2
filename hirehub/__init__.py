"""
HireHub
A recruitment marketplace API with AI-assisted resume parsing.

Architecture:
- MongoDB: every entity (users, jobs, applications, resumes, notifications)
- DeepSeek AI: resume parsing and improvement suggestions
- Skill matching: substring overlap score between resume and job skills
"""

__version__ = "1.0.0"
