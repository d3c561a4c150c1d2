"""
Seed quiz bank loaded into an empty store at startup.

Each quiz has five 3-option questions; lessons reference them by id (q1, q2, ...).
"""

SEED_QUIZZES: list[dict] = [
    {
        "id": "q1",  # onboarding
        "passingScore": 60,
        "questions": [
            {"id": "1", "text": "What is our main mission?", "options": ["Profit", "Innovate", "Copy"], "correctOptionIndex": 1},
            {"id": "2", "text": "Where is HR located?", "options": ["2nd floor", "Ground floor", "At home"], "correctOptionIndex": 0},
            {"id": "3", "text": "How often are payslips published?", "options": ["Weekly", "Monthly", "Yearly"], "correctOptionIndex": 1},
            {"id": "4", "text": "Are flip-flops allowed at the office?", "options": ["Yes", "No", "Fridays only"], "correctOptionIndex": 1},
            {"id": "5", "text": "Who approves vacation requests?", "options": ["Anyone", "Your manager", "Nobody"], "correctOptionIndex": 1},
        ],
    },
    {
        "id": "q2",  # information security
        "passingScore": 60,
        "questions": [
            {"id": "1", "text": "What makes a password strong?", "options": ["Your pet's name", "Your birthday", "Mixed letters, numbers and symbols"], "correctOptionIndex": 2},
            {"id": "2", "text": "How often should critical passwords change?", "options": ["Never", "Every 3-6 months", "Every day"], "correctOptionIndex": 1},
            {"id": "3", "text": "What is MFA?", "options": ["A brand", "An extra security layer", "A virus"], "correctOptionIndex": 1},
            {"id": "4", "text": "Should you share your password?", "options": ["Yes, with coworkers", "Maybe", "Never, not even with IT"], "correctOptionIndex": 2},
            {"id": "5", "text": "Where is it safe to keep passwords?", "options": ["Sticky notes", "A password manager", "A text file"], "correctOptionIndex": 1},
        ],
    },
    {
        "id": "q3",  # communication
        "passingScore": 60,
        "questions": [
            {"id": "1", "text": "Active listening means:", "options": ["Paying close attention", "Talking a lot", "Ignoring"], "correctOptionIndex": 0},
            {"id": "2", "text": "An email should be:", "options": ["Long", "Confusing", "Objective"], "correctOptionIndex": 2},
            {"id": "3", "text": "Feedback is:", "options": ["Criticism", "A gift", "An insult"], "correctOptionIndex": 1},
            {"id": "4", "text": "Meetings should have:", "options": ["An agenda", "Pizza", "Music"], "correctOptionIndex": 0},
            {"id": "5", "text": "Non-verbal communication:", "options": ["Does not exist", "Matters", "Is a myth"], "correctOptionIndex": 1},
        ],
    },
    {
        "id": "q4",  # leadership
        "passingScore": 60,
        "questions": [
            {"id": "1", "text": "A leader should:", "options": ["Command", "Inspire", "Shout"], "correctOptionIndex": 1},
            {"id": "2", "text": "Delegating is:", "options": ["Passing on boring work", "Empowering", "Running away"], "correctOptionIndex": 1},
            {"id": "3", "text": "Micromanagement is:", "options": ["Good", "Bad", "Neutral"], "correctOptionIndex": 1},
            {"id": "4", "text": "A 1:1 is for:", "options": ["Gossip", "Alignment", "Coffee"], "correctOptionIndex": 1},
            {"id": "5", "text": "Culture is built:", "options": ["On paper", "By example", "By email"], "correctOptionIndex": 1},
        ],
    },
    {
        "id": "q5",  # agile
        "passingScore": 60,
        "questions": [
            {"id": "1", "text": "Scrum is a:", "options": ["Recipe", "Framework", "Tool"], "correctOptionIndex": 1},
            {"id": "2", "text": "A sprint lasts:", "options": ["1 year", "2-4 weeks", "1 day"], "correctOptionIndex": 1},
            {"id": "3", "text": "The daily is for:", "options": ["Blaming", "Syncing", "Praying"], "correctOptionIndex": 1},
            {"id": "4", "text": "The PO owns the:", "options": ["Team", "Backlog", "Server"], "correctOptionIndex": 1},
            {"id": "5", "text": "Kanban focuses on:", "options": ["Flow", "Hurry", "Chaos"], "correctOptionIndex": 0},
        ],
    },
    {
        "id": "q6",  # data protection
        "passingScore": 60,
        "questions": [
            {"id": "1", "text": "Data protection law protects:", "options": ["Companies", "Personal data", "Animals"], "correctOptionIndex": 1},
            {"id": "2", "text": "Sensitive data includes:", "options": ["Name", "Religion or health", "Email"], "correctOptionIndex": 1},
            {"id": "3", "text": "The DPO is:", "options": ["A director", "The data protection officer", "The police"], "correctOptionIndex": 1},
            {"id": "4", "text": "Consent must be:", "options": ["Fake", "Explicit", "Implied"], "correctOptionIndex": 1},
            {"id": "5", "text": "Fines can be:", "options": ["Cheap", "Millions", "Nonexistent"], "correctOptionIndex": 1},
        ],
    },
]
