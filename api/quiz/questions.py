"""
Fixed question set seeded into an empty `questions` table on startup.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class SeedQuestion:
    question: str
    options: tuple[str, ...]
    correct_answer: int


SEED_QUESTIONS: tuple[SeedQuestion, ...] = (
    SeedQuestion(
        question="Who built the ark?",
        options=("Moses", "Noah", "Abraham", "David"),
        correct_answer=1,
    ),
    SeedQuestion(
        question="How many books are in the New Testament?",
        options=("27", "39", "66", "12"),
        correct_answer=0,
    ),
    SeedQuestion(
        question="Which city is Jesus' birthplace?",
        options=("Nazareth", "Jerusalem", "Bethlehem", "Capernaum"),
        correct_answer=2,
    ),
    SeedQuestion(
        question="Who was swallowed by a great fish?",
        options=("Elijah", "Peter", "Jonah", "Daniel"),
        correct_answer=2,
    ),
    SeedQuestion(
        question="What is the first book of the Bible?",
        options=("Exodus", "Genesis", "Matthew", "Psalms"),
        correct_answer=1,
    ),
    SeedQuestion(
        question="Who defeated Goliath?",
        options=("Saul", "Samson", "Jonathan", "David"),
        correct_answer=3,
    ),
    SeedQuestion(
        question="How many disciples did Jesus choose?",
        options=("7", "10", "12", "40"),
        correct_answer=2,
    ),
    SeedQuestion(
        question="Who denied Jesus three times?",
        options=("Judas", "Peter", "Thomas", "John"),
        correct_answer=1,
    ),
    SeedQuestion(
        question="Which sea did Moses part?",
        options=("Dead Sea", "Sea of Galilee", "Mediterranean Sea", "Red Sea"),
        correct_answer=3,
    ),
    SeedQuestion(
        question="Who was thrown into the lions' den?",
        options=("Daniel", "Shadrach", "Joseph", "Isaiah"),
        correct_answer=0,
    ),
    SeedQuestion(
        question="What was Paul's name before his conversion?",
        options=("Simon", "Saul", "Silas", "Stephen"),
        correct_answer=1,
    ),
    SeedQuestion(
        question="Which book contains the Ten Commandments first?",
        options=("Leviticus", "Deuteronomy", "Exodus", "Numbers"),
        correct_answer=2,
    ),
    SeedQuestion(
        question="Who was the mother of John the Baptist?",
        options=("Mary", "Elizabeth", "Anna", "Martha"),
        correct_answer=1,
    ),
    SeedQuestion(
        question="How many days and nights did it rain during the flood?",
        options=("7", "12", "30", "40"),
        correct_answer=3,
    ),
    SeedQuestion(
        question="Who wrote most of the Psalms?",
        options=("Solomon", "David", "Asaph", "Moses"),
        correct_answer=1,
    ),
    SeedQuestion(
        question="What did Jesus turn water into at the wedding in Cana?",
        options=("Wine", "Milk", "Oil", "Honey"),
        correct_answer=0,
    ),
    SeedQuestion(
        question="Which disciple doubted the resurrection until he saw Jesus?",
        options=("Andrew", "Philip", "Thomas", "Matthew"),
        correct_answer=2,
    ),
    SeedQuestion(
        question="Who was sold into slavery by his brothers?",
        options=("Benjamin", "Joseph", "Reuben", "Isaac"),
        correct_answer=1,
    ),
    SeedQuestion(
        question="What is the last book of the Bible?",
        options=("Jude", "Malachi", "Acts", "Revelation"),
        correct_answer=3,
    ),
    SeedQuestion(
        question="Which fruit of the Spirit is listed first in Galatians 5?",
        options=("Joy", "Peace", "Love", "Patience"),
        correct_answer=2,
    ),
)
