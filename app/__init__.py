"""mediahub: user administration backend for a self-hosted photo and video library."""
