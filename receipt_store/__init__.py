"""
MedAssist Receipt Store — encrypted AI summaries for medical receipts.
"""
