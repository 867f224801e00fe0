"""Services for the signals bot: publishing, conversations, reports and closes"""
