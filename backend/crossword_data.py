"""Bundled event crossword: the puzzle seeded by ``init_event.py``.

The answer key is held on the server only. ``config.Config`` injects
``EVENT_ANSWER_KEY`` into the crossword validator unless another key file is
configured.
"""

EVENT_PUZZLE = {
    'title': 'IEEE Day 2025 Tech Challenge',
    'description': 'Test your knowledge about AI, technology, and IEEE with this exciting crossword puzzle!',
    'gridSize': {'rows': 15, 'cols': 15},
    'isActive': True,
    'clues': [
        # Across
        {'id': 'across_2', 'number': 2, 'clue': 'AI system that recognizes images',
         'answer': 'COMPUTERVISION', 'direction': 'across', 'startRow': 2, 'startCol': 0, 'length': 14, 'points': 5},
        {'id': 'across_3', 'number': 3, 'clue': 'Organization that celebrates technology and engineering worldwide',
         'answer': 'IEEE', 'direction': 'across', 'startRow': 4, 'startCol': 0, 'length': 4, 'points': 5},
        {'id': 'across_6', 'number': 6, 'clue': 'Popular AI by OpenAI',
         'answer': 'CHATGPT', 'direction': 'across', 'startRow': 6, 'startCol': 5, 'length': 7, 'points': 5},
        {'id': 'across_7', 'number': 7, 'clue': 'Algorithm that improves itself through trial and error',
         'answer': 'REINFORCEMENT', 'direction': 'across', 'startRow': 10, 'startCol': 2, 'length': 13, 'points': 5},
        {'id': 'across_9', 'number': 9, 'clue': 'Month when IEEE Day is celebrated',
         'answer': 'OCTOBER', 'direction': 'across', 'startRow': 11, 'startCol': 7, 'length': 7, 'points': 5},
        {'id': 'across_11', 'number': 11, 'clue': 'Famous humanoid AI robot',
         'answer': 'SOPHIA', 'direction': 'across', 'startRow': 13, 'startCol': 1, 'length': 6, 'points': 5},
        # Down
        {'id': 'down_1', 'number': 1, 'clue': 'Algorithm that learns patterns from data',
         'answer': 'MACHINELEARNING', 'direction': 'down', 'startRow': 0, 'startCol': 0, 'length': 15, 'points': 5},
        {'id': 'down_4', 'number': 4, 'clue': 'Tool that helps predict the future using data',
         'answer': 'ANALYTICS', 'direction': 'down', 'startRow': 2, 'startCol': 3, 'length': 9, 'points': 5},
        {'id': 'down_5', 'number': 5, 'clue': 'Device used to travel through time',
         'answer': 'TIMEMACHINE', 'direction': 'down', 'startRow': 2, 'startCol': 8, 'length': 11, 'points': 5},
        {'id': 'down_8', 'number': 8, 'clue': 'AI that can generate music or sound',
         'answer': 'MUSICAL', 'direction': 'down', 'startRow': 5, 'startCol': 9, 'length': 7, 'points': 5},
        {'id': 'down_10', 'number': 10, 'clue': 'AI that can have conversations with humans',
         'answer': 'CHATBOT', 'direction': 'down', 'startRow': 8, 'startCol': 11, 'length': 7, 'points': 5},
        {'id': 'down_12', 'number': 12, 'clue': 'Most popular programming language for AI',
         'answer': 'PYTHON', 'direction': 'down', 'startRow': 9, 'startCol': 4, 'length': 6, 'points': 5},
    ],
}

EVENT_ANSWER_KEY = {clue['id']: clue['answer'] for clue in EVENT_PUZZLE['clues']}
