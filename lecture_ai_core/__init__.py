"""
lecture_ai_core: documento → guion de clase + narración MP3 vía OpenAI.
"""
