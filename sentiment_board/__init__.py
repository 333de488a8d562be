"""Sentiment Board: batch sentiment analysis of short texts via Gemini."""
