"""
Fixed vocabularies used by the rule-based parser.
"""

# display name → category
SKILL_VOCABULARY = {
    # programming languages
    "JavaScript": "Technical", "TypeScript": "Technical", "Python": "Technical",
    "Java": "Technical", "C++": "Technical", "C#": "Technical", "Go": "Technical",
    "Rust": "Technical", "Ruby": "Technical", "PHP": "Technical", "Swift": "Technical",
    "Kotlin": "Technical", "Scala": "Technical", "MATLAB": "Technical",
    # web & frameworks
    "React": "Technical", "Angular": "Technical", "Vue": "Technical",
    "Node.js": "Technical", "HTML": "Technical", "CSS": "Technical",
    "Express": "Technical", "Spring": "Technical", "Django": "Technical",
    "Flask": "Technical", "FastAPI": "Technical", ".NET": "Technical",
    # data
    "SQL": "Technical", "MongoDB": "Technical", "PostgreSQL": "Technical",
    "MySQL": "Technical", "Redis": "Technical", "Elasticsearch": "Technical",
    "Pandas": "Technical", "NumPy": "Technical", "TensorFlow": "Technical",
    "PyTorch": "Technical", "Machine Learning": "Technical", "Data Analysis": "Technical",
    "Git": "Technical", "Linux": "Technical", "Excel": "Technical",
    # cloud & devops
    "AWS": "Cloud", "Azure": "Cloud", "GCP": "Cloud", "Docker": "Cloud",
    "Kubernetes": "Cloud", "Jenkins": "Cloud", "Terraform": "Cloud",
    "Ansible": "Cloud", "CI/CD": "Cloud",
    # design
    "Figma": "Design", "Sketch": "Design", "Photoshop": "Design",
    "Illustrator": "Design", "InDesign": "Design", "AutoCAD": "Design",
    "UI/UX": "Design", "User Research": "Design", "Wireframing": "Design",
    # soft skills & tools
    "Leadership": "Other", "Communication": "Other", "Teamwork": "Other",
    "Problem Solving": "Other", "Project Management": "Other", "Agile": "Other",
    "Scrum": "Other", "Jira": "Other", "PowerPoint": "Other",
}

SKILL_ALIASES = {
    "js": "JavaScript", "ts": "TypeScript", "node": "Node.js", "nodejs": "Node.js",
    "postgres": "PostgreSQL", "k8s": "Kubernetes", "golang": "Go",
    "google cloud": "GCP", "reactjs": "React", "react.js": "React", "vue.js": "Vue",
}

# substring hints for skills missing from the vocabulary
CATEGORY_HINTS = (
    ("Design", ("design", "figma", "photoshop", "illustrator", "sketch", "ui", "ux", "adobe")),
    ("Cloud", ("cloud", "aws", "azure", "gcp", "docker", "kubernetes", "devops", "terraform", "serverless")),
    ("Technical", ("script", "sql", "python", "java", "api", "programming", "data", "software",
                   "framework", "database", "linux", "git", "testing", "engineering")),
)

LANGUAGE_NAMES = (
    "English", "Spanish", "French", "German", "Chinese", "Mandarin", "Cantonese",
    "Japanese", "Korean", "Hindi", "Arabic", "Portuguese", "Italian", "Russian",
    "Dutch", "Polish", "Turkish", "Vietnamese", "Bengali", "Urdu", "Swedish",
)

PROFICIENCY_LEVELS = (
    "native", "bilingual", "fluent", "professional", "advanced", "intermediate",
    "conversational", "basic", "beginner", "elementary",
)

CERT_KEYWORDS = ("certification", "certificate", "certified", "license", "licence", "credential")

CERT_ISSUERS = (
    "AWS", "Amazon", "Microsoft", "Google", "Oracle", "Cisco", "CompTIA",
    "PMI", "Scrum Alliance", "Salesforce", "Red Hat", "Coursera", "ISC2", "ISACA",
)

# order matters: longer phrases before their prefixes
DEGREE_KEYWORDS = (
    "bachelor", "master", "doctorate", "phd", "ph.d.", "mba", "diploma",
    "certificate", "associate", "b.sc", "m.sc", "b.s.", "m.s.", "b.a.", "m.a.",
    "b.tech", "m.tech", "b.e.",
)

INSTITUTION_HINTS = ("university", "college", "institute", "school", "academy", "polytechnic")

BOILERPLATE_WORDS = ("resume", "résumé", "curriculum", "vitae", "cv")
