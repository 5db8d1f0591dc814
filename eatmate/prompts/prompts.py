"""Fixed texts for the cooking assistant and lookup screens.

SYSTEM_PREAMBLE is sent with every completion request but never stored in the
conversation log. GREETING is the first logged message and is replayed as an
ordinary assistant turn.
"""

ASSISTANT_NAME = "EatMate"

SYSTEM_PREAMBLE = (
    f"You are {ASSISTANT_NAME}, a helpful cooking and nutrition assistant. "
    "Provide concise, practical advice about cooking, recipes, nutrition, and food preparation. "
    "Keep responses under 150 words unless more detail is specifically requested."
)

GREETING = (
    f"Hi! I'm {ASSISTANT_NAME}, your cooking and nutrition assistant. How can I help you today? "
    "You can ask me about recipes, cooking techniques, ingredient substitutions, or nutrition advice."
)

# Appended as an assistant turn whenever the completion call fails
FALLBACK_REPLY = "I'm sorry, I couldn't process your request. Please try again."

CHAT_SUGGESTIONS = (
    "How do I make pasta sauce from scratch?",
    "What can I substitute for eggs in baking?",
    "How many calories are in an avocado?",
    "What's a quick dinner with chicken?",
    "How do I cook quinoa?",
    "What are some healthy breakfast ideas?",
)

SUBSTITUTE_EXAMPLES = (
    "butter",
    "milk",
    "eggs",
    "sugar",
    "flour",
    "rice",
    "vinegar",
    "oil",
    "tomatoes",
    "onions",
)

SEARCH_FAILED_MESSAGE = "Failed to search recipes. Please try again."
RECIPE_FAILED_MESSAGE = "Failed to load recipe details. Please try again."
SUBSTITUTE_FAILED_MESSAGE = "Failed to get substitutes. Please try again."

# Empty-state copy per search mode
NO_RESULTS_MESSAGES = {
    "ingredients": "No recipes found with these ingredients. Try adding different ingredients.",
    "nutrients": "No recipes found with these nutritional requirements. Try adjusting your search criteria.",
    "parameters": "No recipes found with these parameters. Try adjusting your search criteria.",
}
