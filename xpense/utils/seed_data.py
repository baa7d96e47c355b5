# utils/seed_data.py
# Starter content loaded by the /seed endpoints when the tables are empty.

QUIZ_QUESTIONS = [
    {
        "question": "What is the term for money set aside for emergencies?",
        "category": "Finance Basics",
        "options": ["Emergency Fund", "Savings Account", "Checking Account", "Money Market"],
        "correct_answer": "Emergency Fund",
        "difficulty": "easy",
        "points": 5,
    },
    {
        "question": "What does APR stand for?",
        "category": "Finance Basics",
        "options": ["Annual Percentage Rate", "Approved Payment Return", "Asset Protection Reserve", "Annual Payment Reduction"],
        "correct_answer": "Annual Percentage Rate",
        "difficulty": "easy",
        "points": 5,
    },
    {
        "question": "Which of these is NOT a type of retirement account?",
        "category": "Investing",
        "options": ["401(k)", "IRA", "Roth IRA", "FDR"],
        "correct_answer": "FDR",
        "difficulty": "medium",
        "points": 10,
    },
    {
        "question": "What is the rule of 72 used for?",
        "category": "Investing",
        "options": [
            "Calculating how long it takes money to double",
            "Determining tax brackets",
            "Calculating mortgage payments",
            "Setting retirement goals",
        ],
        "correct_answer": "Calculating how long it takes money to double",
        "difficulty": "medium",
        "points": 10,
    },
    {
        "question": "What is the term for the gradual increase in the general price level of goods and services?",
        "category": "Economics",
        "options": ["Inflation", "Recession", "Depression", "Stagnation"],
        "correct_answer": "Inflation",
        "difficulty": "easy",
        "points": 5,
    },
    {
        "question": "Which of these is considered a liquid asset?",
        "category": "Finance Basics",
        "options": ["Cash", "Real Estate", "Collectibles", "Business Equipment"],
        "correct_answer": "Cash",
        "difficulty": "easy",
        "points": 5,
    },
    {
        "question": "What is the term for the decrease in value of an asset over time?",
        "category": "Finance Basics",
        "options": ["Depreciation", "Amortization", "Appreciation", "Inflation"],
        "correct_answer": "Depreciation",
        "difficulty": "medium",
        "points": 10,
    },
    {
        "question": "What is the primary purpose of a budget?",
        "category": "Budgeting",
        "options": ["Track income and expenses", "Increase debt", "Avoid saving money", "Increase spending"],
        "correct_answer": "Track income and expenses",
        "difficulty": "easy",
        "points": 5,
    },
    {
        "question": "What is the 50/30/20 rule in budgeting?",
        "category": "Budgeting",
        "options": [
            "50% needs, 30% wants, 20% savings",
            "50% savings, 30% needs, 20% wants",
            "50% wants, 30% savings, 20% needs",
            "50% income, 30% expenses, 20% debt",
        ],
        "correct_answer": "50% needs, 30% wants, 20% savings",
        "difficulty": "medium",
        "points": 10,
    },
    {
        "question": "What is the term for the total value of all goods and services produced within a country in a year?",
        "category": "Economics",
        "options": ["GDP", "GNP", "CPI", "PPP"],
        "correct_answer": "GDP",
        "difficulty": "medium",
        "points": 10,
    },
    {
        "question": "What is a bull market?",
        "category": "Investing",
        "options": [
            "A market experiencing prolonged price increases",
            "A market experiencing prolonged price decreases",
            "A market with high volatility",
            "A market with low trading volume",
        ],
        "correct_answer": "A market experiencing prolonged price increases",
        "difficulty": "medium",
        "points": 10,
    },
    {
        "question": "What is the term for the risk that an investment's value will fluctuate due to changes in market factors?",
        "category": "Investing",
        "options": ["Market Risk", "Credit Risk", "Liquidity Risk", "Operational Risk"],
        "correct_answer": "Market Risk",
        "difficulty": "hard",
        "points": 15,
    },
    {
        "question": "What is the term for the strategy of investing in a wide range of assets to reduce risk?",
        "category": "Investing",
        "options": ["Diversification", "Leverage", "Hedging", "Arbitrage"],
        "correct_answer": "Diversification",
        "difficulty": "medium",
        "points": 10,
    },
    {
        "question": "What is the difference between a traditional IRA and a Roth IRA?",
        "category": "Investing",
        "options": [
            "Traditional is taxed on withdrawal, Roth is taxed on contribution",
            "Traditional has higher contribution limits than Roth",
            "Roth is for employers, Traditional is for individuals",
            "There is no difference",
        ],
        "correct_answer": "Traditional is taxed on withdrawal, Roth is taxed on contribution",
        "difficulty": "hard",
        "points": 15,
    },
    {
        "question": "What is the term for the additional amount paid to bondholders as compensation for credit risk?",
        "category": "Investing",
        "options": ["Risk Premium", "Coupon Rate", "Yield", "Par Value"],
        "correct_answer": "Risk Premium",
        "difficulty": "hard",
        "points": 15,
    },
]

BOOKS = [
    {
        "title": "Personal Finance for Students",
        "author": "Jane Doe",
        "description": "A comprehensive guide to managing your finances as a student, covering budgeting, "
                       "saving, and investing basics.",
        "cover_image": "https://via.placeholder.com/300x400?text=Personal+Finance",
        "price": 50,
        "category": "Finance",
    },
    {
        "title": "Budgeting 101",
        "author": "John Smith",
        "description": "Learn the fundamentals of creating and sticking to a budget that works for your lifestyle.",
        "cover_image": "https://via.placeholder.com/300x400?text=Budgeting+101",
        "price": 30,
        "category": "Budgeting",
    },
    {
        "title": "Investing for Beginners",
        "author": "Michael Johnson",
        "description": "Start your investment journey with this easy-to-understand guide to the stock market "
                       "and other investment vehicles.",
        "cover_image": "https://via.placeholder.com/300x400?text=Investing",
        "price": 75,
        "category": "Investing",
    },
    {
        "title": "Debt-Free Living",
        "author": "Sarah Williams",
        "description": "Strategies to eliminate debt and achieve financial freedom, with practical steps "
                       "and real-life examples.",
        "cover_image": "https://via.placeholder.com/300x400?text=Debt+Free",
        "price": 45,
        "category": "Finance",
    },
    {
        "title": "The Psychology of Money",
        "author": "Robert Brown",
        "description": "Understanding the emotional and psychological aspects of financial decisions and "
                       "how to make better choices.",
        "cover_image": "https://via.placeholder.com/300x400?text=Psychology+of+Money",
        "price": 60,
        "category": "Finance",
    },
]
