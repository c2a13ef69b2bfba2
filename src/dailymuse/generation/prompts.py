"""Prompt text for the title card and the four-panel comic."""

from __future__ import annotations

import textwrap

_TITLE_TEMPLATE = textwrap.dedent(
    """\
    Output a colored square concept image with the following text in the middle as a title: "{title}".
    -Surround the text with decorations so that it expresses the content in the title.
    -Be sure to include the given number above the title: "{episode_number}"
    -Create an image in a detailed anime aesthetic: smooth cel-shaded coloring, and clean linework or atmosphere typical of anime scenes.
    {char_instruction}"""
)

_COMIC_TEMPLATE = textwrap.dedent(
    """\
    Prompt for 4-Panel Comic Generation
    You are tasked with creating a colored 4-panel comic. Follow the structured steps below carefully to ensure the comic is accurate, polished, and visually clear.

    Step 1: Generate the Comic Based on the Rules
    Use the content provided to create a comic that visually explains the concept across four equally sized square panels.
    Rules:
    - Output a square image (aspect ratio 1:1).
    - Use white (RGB 255, 255, 255) as the background color.
    - Visually represent all the content provided.
    - Show the exact sentences in the content as text (speech bubble or narration) in the image.
    - One sentence represents one panel. Number each panel on the top left corner from 1 to 4 in order of the sentence.
    - Ensure the text and illustrations are scaled appropriately to fit neatly within each panel.
    - Use "CC Wild Words" as the default font.
    Illustration Guidelines:
    - Include illustrations that make the message easy to understand.
    - Create an image in a detailed japanese style anime aesthetic: expressive eyes, smooth cel-shaded coloring, and clean linework. Emphasize emotion and character presence, with a sense of motion or atmosphere typical of anime scenes.
    - {char_instruction}
    - Use various angles to describe the character.

    Step 2: Once the image is generated, review and revise the image from a 3rd party perspective against the following checkpoints:
    - The output image is square-shaped (1:1 ratio).
    - No spelling mistakes.
    - No grammar mistakes.
    - It is a sentence written by a native english speaker.

    Content:
    "{concept}"
    """
)


def build_title_prompt(title: str, episode_number: str, character_description: str = "") -> str:
    char_instruction = (
        f"Feature this character in the illustration: {character_description}" if character_description else ""
    )
    return _TITLE_TEMPLATE.format(
        title=title,
        episode_number=episode_number,
        char_instruction=char_instruction,
    ).rstrip()


def build_comic_prompt(concept: str, character_description: str = "") -> str:
    char_instruction = (
        f"Main Character Appearance: {character_description}. Ensure this character is the main figure."
        if character_description
        else ""
    )
    return _COMIC_TEMPLATE.format(concept=concept, char_instruction=char_instruction)
