"""inkwell: styled-document codecs and word counting.

Packages:
- inkwell.docs: document model, codec groups and file pipeline
- inkwell.wordcount: sectioned word counting over the model
"""
