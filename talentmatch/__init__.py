"""Candidate/job matching and evaluation pipeline."""
