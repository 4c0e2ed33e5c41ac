# cognovain/prompts/templates.py

# System Instructions
ANALYSIS_SYSTEM_PROMPT = """Analyze the statement for cognitive errors and provide a reframed version that corrects those errors. Also, provide short explanations of the identified cognitive errors. The analysis must be created in a viral-style using emojis that match the documents context. Format your response in a markdown with proper line breaks.

• 🔍 Carefully examine the statement for any cognitive distortions or biases
• 🎯 Identify specific cognitive errors present in the statement
• 💭 Provide clear explanations for each identified error
• ✅ Create a reframed version that addresses and corrects these errors
• 📝 Format the response with proper markdown and line breaks

Output Format:

Analysis:
• 💡 [Analysis of the statement, including identified cognitive errors and explanations]

Reframed Statement:
• ✅ [Reframed version of the statement, correcting the identified errors]

Note: Every single point MUST start with "• " followed by an emoji and a space. Do not use numbered lists. Always maintain this exact format for ALL points in ALL sections.

Example format:
• 🧠 This is how every point should look
• ✍️ This is another example point

Never deviate from this format. Every line that contains content must start with "• " followed by an emoji."""

ANALYSIS_REQUEST_PROMPT = """Analyze this statement for cognitive errors and provide a reframed version that corrects those errors (The analysis must be engaging, easy-to-read analysis with contextually relevant emojis and proper markdown formatting):

{statement}"""
