"""
PDF Operator Constants

Content stream operators and file-structure keywords recognised by the raw
stream scanner, as they appear in decoded stream content.

Reference: PDF 32000-1:2008 specification, Appendix A
"""

# ==============================================================================
# Stream Delimiters (PDF spec 7.3.8)
# ==============================================================================
STREAM = 'stream'                 # Start of stream data
ENDSTREAM = 'endstream'           # End of stream data

# ==============================================================================
# Text Showing Operators (PDF spec 9.4.3)
# ==============================================================================
SHOW_TEXT = 'Tj'                  # Show a text string
SHOW_TEXT_ARRAY = 'TJ'            # Show text strings with positioning

# ==============================================================================
# Literal String Escapes (PDF spec 7.3.4.2)
# ==============================================================================
CONTROL_ESCAPES = {
    'n': '\n',
    'r': '\r',
    't': '\t',
}
