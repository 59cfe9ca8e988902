"""
Fixed instruction texts sent to the remote generation service.
"""

VISION_INSTRUCTION = """Analyze this image in extreme detail for HTML/CSS recreation. Provide:
1. EXACT LAYOUT: Describe the precise layout structure (header, sections, columns, grid)
2. COLORS: List ALL colors used with EXACT hex codes:
   - Background colors (page, sections, cards, headers)
   - Text colors (headings, body text, labels, links)
   - Border colors (dividers, cards, buttons, inputs)
   - Button colors (background, text, hover states)
   - Accent colors (badges, highlights, icons)
3. TYPOGRAPHY: Font families, sizes, weights, styles, text alignment, line heights, letter spacing
4. SPACING: Exact margins, padding, gaps between elements (in pixels or rem)
5. COMPONENTS: Every UI element with their styling:
   - Buttons (size, padding, border-radius, shadows)
   - Cards (backgrounds, borders, shadows, spacing)
   - Forms (input styles, labels, focus states)
   - Tables (borders, cell padding, header styles)
   - Images (sizes, borders, shadows)
   - Icons and badges
6. DIMENSIONS: Exact widths, heights, sizes of all elements
7. POSITIONING: Layout method (flexbox, grid, positioning)
8. VISUAL EFFECTS:
   - Box shadows (spread, blur, color, opacity)
   - Border radius values
   - Gradients (direction, colors, stops)
   - Hover/focus effects
   - Transitions and animations
9. EXACT CONTENT: All visible text, headings, labels, data, numbers, icons
10. STRUCTURE: Complete hierarchy from top to bottom
11. BORDERS: Style, width, and color for all bordered elements

Extract EXACT color codes from the design. Be extremely precise with all styling details."""


SYSTEM_INSTRUCTION = """You are an expert front-end developer specializing in pixel-perfect HTML/CSS recreation.
When given a design description, you recreate it EXACTLY with a 600px width container, matching colors
(backgrounds, text, borders), layout, spacing, typography, borders, shadows, and all visual elements precisely.

Key requirements:
1. Extract and apply EXACT hex color codes from the design analysis
2. Apply border styles (width, style, color, radius) to all matching elements
3. Apply background colors to the page, sections, cards, buttons and all containers as specified
4. NEVER include image files or <img> tags, only recreate designs using HTML/CSS
5. Add descriptive alt attributes to icon placeholders and decorative elements
6. Output ONLY clean HTML code with inline CSS, no explanations
7. The main container MUST always be max-width: 600px with margin: 0 auto for centering"""


START_COMMAND = "start"

START_COMMAND_INSTRUCTION = (
    "Generate responsive HTML code for mailer only with inline css don't include tags "
    "(h, p, span, div) also don't add margin or padding for space instead of add blank td "
    "with height except button for button add line-height, read properties and structure "
    "from json and for reference use image"
)

START_COMMAND_DISPLAY = "Code generation started, please wait..."

DEFAULT_DISPLAY_TEXT = "Analyze the uploaded files"

DOCUMENT_GENERATED_MESSAGE = "HTML code generated successfully ✓"

EMPTY_INPUT_GUIDANCE = "Please enter a valid message or upload a file."

START_REQUIRES_BOTH_MESSAGE = (
    'Please upload both a JSON file and an image before using the "start" command.'
)

UNHANDLED_ERROR_MESSAGE = "Sorry, I encountered an error. Please try again."


DESIGN_REFERENCE_REQUIREMENTS = [
    "Container width MUST be exactly 600px",
    "Center the container horizontally on the page",
    "Match EXACT layout structure from the design analysis",
    "Use EXACT colors from the analysis:\n"
    "   - Apply exact hex codes for backgrounds, text, and borders\n"
    "   - Match color intensity and opacity\n"
    "   - Preserve color hierarchy and contrast",
    "Border styling MUST match exactly:\n"
    "   - Use exact border-width, border-style, and border-color\n"
    "   - Apply borders to matching elements (cards, sections, dividers)\n"
    "   - Match border-radius values precisely",
    "Background colors MUST be applied correctly:\n"
    "   - Page background\n"
    "   - Section backgrounds\n"
    "   - Card/container backgrounds\n"
    "   - Button backgrounds\n"
    "   - Header/footer backgrounds",
    "Text colors MUST match the reference:\n"
    "   - Heading colors\n"
    "   - Body text colors\n"
    "   - Link colors\n"
    "   - Label colors",
    "Recreate ALL UI components exactly as analyzed",
    "Match dimensions and proportions precisely (scaled to 600px width)",
    "Apply exact shadows, gradients, and visual effects",
    "DO NOT include any reference images in the HTML",
    "DO NOT use <img> tags - recreate design using HTML/CSS only",
    "Add descriptive alt attributes to any icon placeholders or decorative elements",
]

GENERIC_LAYOUT_REQUIREMENTS = [
    "Container width MUST be exactly 600px",
    "Center the container horizontally on the page",
    "Professional, clean design with proper color scheme",
    "Display JSON data in organized format",
    "Use semantic HTML with descriptive alt text for visual elements",
]

STRUCTURED_DATA_REQUIREMENTS = [
    "Display JSON data in the same style/format as the reference design",
    "Integrate JSON data into matching UI components (tables, cards, lists)",
    "Maintain consistent color scheme for data display elements",
]

OUTPUT_FORMAT = """OUTPUT FORMAT:
- Complete HTML5 document starting with <!DOCTYPE html>
- ALL CSS must be inline in <style> tag
- Main container: max-width: 600px; margin: 0 auto;
- Must be pixel-perfect match to the reference design
- Color values must be exact (use hex codes from analysis)
- Border properties must match reference exactly
- Background colors must be applied to all matching elements
- Add appropriate alt text for decorative elements and icons
- Add padding on body for better appearance
- NO explanations, NO markdown, ONLY HTML code
- DO NOT include any <img> tags or image files

START GENERATING THE HTML NOW:"""
