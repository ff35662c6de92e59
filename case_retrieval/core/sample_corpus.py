# Case passages used to seed the index for local testing.
SAMPLE_PASSAGES = [
    "FIR was registered under section 498A and 406 IPC.",
    "The accused was granted interim bail.",
    "Complainant claims mental harassment due to dowry.",
    "No physical evidence was submitted to the court.",
    "Statements recorded under Section 161 of CrPC.",
]
