"""
Prompts and response schemas sent to the AI service
"""

# ============================================================================#
# Diagnosis
# ============================================================================#
DIAGNOSIS_PROMPT = (
    "ACT AS AGRI-NEXUS AGENT. Analyze this crop disease. "
    "Simulate MCP (Model Context Protocol) tool calls to 'Satellite_Weather' and 'Soil_Database'. "
    "Provide a sustainability score. Output JSON."
)

DIAGNOSIS_SCHEMA = {
    "type": "object",
    "properties": {
        "disease": {"type": "string"},
        "confidence": {"type": "number"},
        "description": {"type": "string"},
        "symptoms": {"type": "array", "items": {"type": "string"}},
        "treatment": {"type": "array", "items": {"type": "string"}},
        "prevention": {"type": "array", "items": {"type": "string"}},
        "climateImpact": {"type": "string"},
        "sustainabilityScore": {"type": "number"},
    },
}

# ============================================================================#
# Chat
# ============================================================================#
CHAT_SYSTEM_INSTRUCTION = (
    "You are the Agri-Nexus AI Agent. Your goal is to help farmers maximize yield while "
    "maintaining organic sustainability. You use Vibe Coding principles to be efficient and "
    "empathetic. Always include a short 'Agent Thought' property if you were an internal process."
)

# ============================================================================#
# Market
# ============================================================================#
MARKET_PROMPT = "Analyze market trends. Act as a financial agricultural agent. Data: {data}"

# ============================================================================#
# Identity
# ============================================================================#
IDENTITY_PROMPT = (
    "Generate a professional agricultural resume/identity for a farmer at {location}. "
    "Farm context: {context}. Output JSON."
)

IDENTITY_SCHEMA = {
    "type": "object",
    "properties": {
        "name": {"type": "string"},
        "nexusScore": {"type": "number"},
        "verifiedLocation": {"type": "string"},
        "impactMetrics": {
            "type": "object",
            "properties": {
                "waterSaved": {"type": "string"},
                "chemicalReduction": {"type": "string"},
                "yieldBoost": {"type": "string"},
            },
        },
        "cvDomain": {"type": "string"},
    },
}

# ============================================================================#
# Speech
# ============================================================================#
SPEECH_INSTRUCTION = "Read the user's text aloud exactly as written. Do not add anything."
