# utils/quotes.py
import random

FINANCIAL_QUOTES = [
    {
        "text": "Do not save what is left after spending, but spend what is left after saving.",
        "author": "Warren Buffett",
        "category": "Saving",
    },
    {
        "text": "A budget is telling your money where to go instead of wondering where it went.",
        "author": "Dave Ramsey",
        "category": "Budgeting",
    },
    {
        "text": "The habit of saving is itself an education; it fosters every virtue, teaches self-denial, "
                "cultivates the sense of order, trains to forethought, and so broadens the mind.",
        "author": "T.T. Munger",
        "category": "Saving",
    },
    {
        "text": "Financial peace isn't the acquisition of stuff. It's learning to live on less than you make, "
                "so you can give money back and have money to invest.",
        "author": "Dave Ramsey",
        "category": "Finance",
    },
    {
        "text": "Never spend your money before you have it.",
        "author": "Thomas Jefferson",
        "category": "Budgeting",
    },
    {
        "text": "The price of anything is the amount of life you exchange for it.",
        "author": "Henry David Thoreau",
        "category": "Finance",
    },
    {
        "text": "It's not how much money you make, but how much money you keep, how hard it works for you, "
                "and how many generations you keep it for.",
        "author": "Robert Kiyosaki",
        "category": "Investing",
    },
    {
        "text": "An investment in knowledge pays the best interest.",
        "author": "Benjamin Franklin",
        "category": "Education",
    },
    {
        "text": "Money is only a tool. It will take you wherever you wish, but it will not replace you as the driver.",
        "author": "Ayn Rand",
        "category": "Finance",
    },
    {
        "text": "The individual investor should act consistently as an investor and not as a speculator.",
        "author": "Benjamin Graham",
        "category": "Investing",
    },
]


def random_quote() -> dict:
    return random.choice(FINANCIAL_QUOTES)
