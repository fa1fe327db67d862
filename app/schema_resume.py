# canonical schema (empty lists – no placeholders)
RESUME_SCHEMA = {
    "personalInfo": {
        "name": "",
        "email": "",
        "phone": "",
        "location": "",
        "linkedin": "",
        "website": "",
    },
    "summary": "",
    "skills": [],
    "experience": [],
    "education": [],
    "certifications": [],
    "languages": [],
}

SKILL_CATEGORIES = ("Technical", "Design", "Cloud", "Other")

SCORE_KEYS = ("skillsScore", "experienceScore", "educationScore", "overallScore")

# target shape shown to the model, with example values
PROMPT_SCHEMA = {
    "personalInfo": {
        "name": "",
        "email": "",
        "phone": "",
        "location": "",
        "linkedin": "",
        "website": "",
    },
    "summary": "",
    "skills": [{"name": "", "level": 85, "category": "Technical | Design | Cloud | Other"}],
    "experience": [
        {
            "company": "",
            "position": "",
            "startDate": "",
            "endDate": "YYYY or Present",
            "description": "",
            "achievements": [""],
        }
    ],
    "education": [{"institution": "", "degree": "", "field": "", "year": "", "gpa": ""}],
    "certifications": [{"name": "", "issuer": "", "date": ""}],
    "languages": [{"name": "", "proficiency": ""}],
}

PDF = "application/pdf"
MS_WORD = "application/msword"
OOXML_WORD = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
ALLOWED_MEDIA_TYPES = (PDF, MS_WORD, OOXML_WORD)
