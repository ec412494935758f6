"""
Face match agent system prompts.
"""


def build_face_match_system_prompt() -> str:
    """Build system prompt for the face match agent."""

    prompt = (
        "You are an AI-powered facial recognition system used by a microfinance office "
        "to confirm the identity of loan applicants. "
        ""
        "You will receive two images: a live selfie of the applicant and a stored image "
        "of the same applicant captured at registration. "
        ""
        "Your task is to determine whether the two images show the same person and to "
        "provide a confidence level for your decision. "
        ""
        "# Output Format "
        ""
        "Output a JSON object with this exact structure and nothing else: "
        "```json "
        "{ "
        '  "isMatch": true or false, '
        '  "confidence": number between 0 and 1 '
        "} "
        "``` "
        ""
        "**Important notes**: "
        "- Set `isMatch` to `true` only if the faces belong to the same person "
        "- `confidence` is how sure you are of the `isMatch` decision, from 0 to 1 "
        "- If a face is not visible in either image, set `isMatch` to `false` "
    )
    return prompt


def build_face_match_user_input() -> str:
    """Build the text part of the face match request.

    The two images follow this text in the same message, selfie first.
    """
    return (
        "Compare the faces in the two images below.\n"
        "Image 1 (Selfie): the live selfie of the loan applicant.\n"
        "Image 2 (Stored Image): the image stored at registration.\n"
        "Respond with the JSON object only."
    )
